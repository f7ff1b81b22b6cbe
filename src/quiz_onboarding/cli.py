"""
Command-line interface for quiz-onboarding

Resolve and inspect quiz definitions, validate quiz files, and walk the
onboarding quiz in the terminal with resumable progress.
"""

import asyncio
import sys
import argparse
import json
import logging
from pathlib import Path
from typing import List, Optional

from .config import Config, config
from .errors import QuizError
from .orchestrator import OnboardingPhase, build_orchestrator
from .quiz.flow import QuizFlow
from .quiz.schema import ImageOption, Option, Question, QuizDefinition, TextOption, decode_quiz


def displayed_options(question: Question) -> List[Option]:
    """Options shown for a question, in order."""
    return question.options_for_type() or list(question.options)


def format_option(option: Option, selected: bool) -> str:
    """Format a single option row."""
    mark = "[x]" if selected else "[ ]"
    if isinstance(option, TextOption):
        line = f"{mark} {option.title.upper()}"
        if option.subtitle:
            line += f" - {option.subtitle}"
    elif isinstance(option, ImageOption):
        line = f"{mark} {option.title.upper()} ({option.asset})"
    else:
        line = f"{mark} {option.title or option.id} {option.hex}"
    return line


def format_question(flow: QuizFlow) -> str:
    """Render the current question and its options for the terminal."""
    question = flow.current
    selected = flow.selected()
    lines = [
        f"\n{question.nav_title} ({flow.index + 1}/{flow.quiz.question_count})",
        "=" * 60,
        question.title,
    ]
    if question.subtitle:
        lines.append(question.subtitle)
    lines.append("")
    for i, option in enumerate(displayed_options(question), start=1):
        lines.append(f"  {i}. {format_option(option, option.id in selected)}")
    lines.append("")

    commands = ["number = toggle"]
    if flow.is_current_valid:
        commands.append("c = finish" if flow.is_last else "c = continue")
    if flow.can_go_back:
        commands.append("b = back")
    commands.append("q = save & quit")
    lines.append(" | ".join(commands))
    return "\n".join(lines)


def apply_command(flow: QuizFlow, command: str) -> str:
    """
    Apply one line of user input to the flow.

    Returns:
        "toggled", "continued", "finished", "back", "quit", or "ignored"
    """
    command = command.strip().lower()

    if command == "q":
        return "quit"
    if command == "b":
        return "back" if flow.back() else "ignored"
    if command == "c":
        before = flow.index
        if flow.continue_() is not None:
            return "finished"
        return "continued" if flow.index != before else "ignored"

    if command.isdigit():
        options = displayed_options(flow.current)
        position = int(command)
        if 1 <= position <= len(options):
            flow.toggle_option(options[position - 1].id)
            return "toggled"

    return "ignored"


def print_quiz(quiz: QuizDefinition, source: Optional[str] = None):
    """Print a readable summary of a quiz definition."""
    print("\n" + "=" * 60)
    print(f"{quiz.title or 'QUIZ'} (v{quiz.version})" + (f" from {source}" if source else ""))
    print("=" * 60)
    for i, question in enumerate(quiz.questions, start=1):
        bounds = ""
        if question.min_select is not None or question.max_select is not None:
            bounds = f" [min {question.min_select}, max {question.max_select}]"
        print(f"\n{i}. {question.title} ({question.type.value}, id={question.id}){bounds}")
        for option in question.options:
            print(f"     - {option.id}: {option.title or ''}".rstrip())
    print()


async def cmd_show(cfg: Config, as_json: bool) -> int:
    orchestrator = build_orchestrator(cfg)
    try:
        quiz = await orchestrator.resolver.fetch_quiz()
    except QuizError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        await orchestrator.close()

    if as_json:
        print(quiz.to_json())
    else:
        print_quiz(quiz, orchestrator.resolver.source_of_cached)
    return 0


def cmd_validate(path: str) -> int:
    try:
        quiz = decode_quiz(Path(path).read_bytes())
    except OSError as e:
        print(f"Error: could not read {path}: {e}", file=sys.stderr)
        return 1
    except QuizError as e:
        print(f"Invalid quiz: {e}", file=sys.stderr)
        return 1

    is_valid, errors = quiz.validate()
    if not is_valid:
        for error in errors:
            print(f"  ✗ {error}", file=sys.stderr)
        return 1

    print(f"✓ {path}: {quiz.question_count} questions, version {quiz.version}")
    return 0


def cmd_progress(cfg: Config, clear: bool) -> int:
    progress = build_orchestrator(cfg).progress
    try:
        if clear:
            progress.clear()
            print("Saved progress cleared.")
            return 0
        checkpoint = progress.load()
    except QuizError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if checkpoint is None:
        print("No saved progress.")
    else:
        print(json.dumps(checkpoint.to_dict(), indent=2))
    return 0


async def cmd_take(cfg: Config, reset: bool) -> int:
    orchestrator = build_orchestrator(cfg)
    try:
        if reset:
            orchestrator.progress.clear()

        flow = await orchestrator.take_quiz()
        if flow is None:
            print(f"Error: {orchestrator.last_error}", file=sys.stderr)
            return 1

        while orchestrator.phase is OnboardingPhase.IN_FLOW:
            print(format_question(flow))
            try:
                command = input("> ")
            except EOFError:
                command = "q"

            outcome = apply_command(flow, command)
            if outcome == "quit":
                orchestrator.save_progress()
                print("Progress saved. Run again to resume.")
                return 0
            if outcome != "finished":
                orchestrator.save_progress()

        print("\n" + "=" * 60)
        print("QUIZ COMPLETE")
        print("=" * 60)
        print(json.dumps(orchestrator.result.answers, indent=2))
        return 0
    except QuizError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        await orchestrator.close()


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Remote-configured onboarding quiz",
        epilog="Example: quiz-onboarding --offline take",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show debug logging"
    )
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Skip remote config and use the bundled quiz"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    show_parser = subparsers.add_parser("show", help="Resolve and print the quiz")
    show_parser.add_argument("--json", action="store_true", help="Output the quiz as JSON")

    validate_parser = subparsers.add_parser("validate", help="Check a quiz JSON file")
    validate_parser.add_argument("file", help="Path to a quiz JSON file")

    take_parser = subparsers.add_parser("take", help="Take the quiz in the terminal")
    take_parser.add_argument("--reset", action="store_true", help="Discard saved progress first")

    progress_parser = subparsers.add_parser("progress", help="Show saved progress")
    progress_parser.add_argument("--clear", action="store_true", help="Delete saved progress")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    cfg = config
    if args.offline:
        cfg = Config.offline_mode(config)

    if args.command == "show":
        return asyncio.run(cmd_show(cfg, args.json))
    if args.command == "validate":
        return cmd_validate(args.file)
    if args.command == "take":
        return asyncio.run(cmd_take(cfg, args.reset))
    return cmd_progress(cfg, args.clear)


if __name__ == "__main__":
    sys.exit(main())
