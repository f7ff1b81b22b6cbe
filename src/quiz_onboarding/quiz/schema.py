"""
Quiz schema and data structures

Defines the quiz definition delivered by remote config: a versioned, ordered
list of questions, each carrying a typed option set. Decoding is structural
only; a payload that does not match the wire format raises InvalidPayload.
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional, Union
from enum import Enum
import json

from ..errors import InvalidPayload


class QuestionType(str, Enum):
    """Types of quiz questions."""
    CHECKLIST = "checkbox"
    GRID = "grid"
    COLOR_SWATCH = "color"


class OptionKind(str, Enum):
    """Option variants, keyed by the wire "type" discriminator."""
    TEXT = "text"
    IMAGE = "image"
    COLOR = "color"


# Which option kind each question type renders
OPTION_KIND_FOR_QUESTION = {
    QuestionType.CHECKLIST: OptionKind.TEXT,
    QuestionType.GRID: OptionKind.IMAGE,
    QuestionType.COLOR_SWATCH: OptionKind.COLOR,
}


# =============================================================================
# FIELD HELPERS
# =============================================================================

def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def _field(data: dict, key: str, kind: type, path: str, required: bool = True) -> Any:
    """
    Read a typed field from a decoded JSON object.

    null and a missing key are the same thing: None for optional fields,
    InvalidPayload for required ones.
    """
    value = data.get(key)
    if value is None:
        if required:
            raise InvalidPayload(f"Missing required field '{_join(path, key)}'")
        return None

    # bool is an int subclass in Python, JSON true is not a number
    if (kind is int and isinstance(value, bool)) or not isinstance(value, kind):
        raise InvalidPayload(
            f"Field '{_join(path, key)}' must be {kind.__name__}, got {type(value).__name__}"
        )
    return value


def _object(data: Any, path: str) -> dict:
    if not isinstance(data, dict):
        raise InvalidPayload(f"'{path or 'quiz'}' must be an object, got {type(data).__name__}")
    return data


def _array(data: dict, key: str, path: str) -> list:
    return _field(data, key, list, path)


# =============================================================================
# OPTIONS
# =============================================================================

@dataclass(frozen=True)
class TextOption:
    """A checklist row: title with an optional subtitle."""
    id: str
    title: str
    subtitle: Optional[str] = None

    kind: ClassVar[OptionKind] = OptionKind.TEXT

    def to_dict(self) -> dict:
        result = {"type": self.kind.value, "id": self.id, "title": self.title}
        if self.subtitle is not None:
            result["subtitle"] = self.subtitle
        return result


@dataclass(frozen=True)
class ImageOption:
    """A grid tile. `asset` travels as the "image" key on the wire."""
    id: str
    title: str
    asset: str

    kind: ClassVar[OptionKind] = OptionKind.IMAGE

    def to_dict(self) -> dict:
        return {"type": self.kind.value, "id": self.id, "title": self.title, "image": self.asset}


@dataclass(frozen=True)
class ColorOption:
    """A color swatch. The title is optional."""
    id: str
    hex: str
    title: Optional[str] = None

    kind: ClassVar[OptionKind] = OptionKind.COLOR

    def to_dict(self) -> dict:
        result = {"type": self.kind.value, "id": self.id}
        if self.title is not None:
            result["title"] = self.title
        result["hex"] = self.hex
        return result


Option = Union[TextOption, ImageOption, ColorOption]


def option_from_dict(data: Any, path: str = "option") -> Option:
    """Decode a single option, dispatching on its "type" tag."""
    data = _object(data, path)
    tag = _field(data, "type", str, path)

    try:
        kind = OptionKind(tag)
    except ValueError:
        raise InvalidPayload(f"Unknown option type '{tag}' at '{_join(path, 'type')}'") from None

    option_id = _field(data, "id", str, path)
    if kind is OptionKind.TEXT:
        return TextOption(
            id=option_id,
            title=_field(data, "title", str, path),
            subtitle=_field(data, "subtitle", str, path, required=False),
        )
    if kind is OptionKind.IMAGE:
        return ImageOption(
            id=option_id,
            title=_field(data, "title", str, path),
            asset=_field(data, "image", str, path),
        )
    return ColorOption(
        id=option_id,
        hex=_field(data, "hex", str, path),
        title=_field(data, "title", str, path, required=False),
    )


# =============================================================================
# QUESTIONS
# =============================================================================

@dataclass(frozen=True)
class Question:
    """A single quiz question."""
    id: str
    type: QuestionType
    nav_title: str
    title: str
    options: tuple[Option, ...] = ()
    subtitle: Optional[str] = None
    min_select: Optional[int] = None  # declared, not enforced
    max_select: Optional[int] = None  # declared, not enforced

    def __post_init__(self):
        if not isinstance(self.options, tuple):
            object.__setattr__(self, "options", tuple(self.options))

    @property
    def option_ids(self) -> list[str]:
        return [o.id for o in self.options]

    def option(self, option_id: str) -> Optional[Option]:
        """Look up an option by id."""
        for opt in self.options:
            if opt.id == option_id:
                return opt
        return None

    def options_for_type(self) -> list[Option]:
        """
        Options this question type knows how to present.

        Checklists show text rows, grids show images, color questions show
        swatches. Options of another kind are skipped, not rejected.
        """
        kind = OPTION_KIND_FOR_QUESTION[self.type]
        return [o for o in self.options if o.kind is kind]

    def to_dict(self) -> dict:
        result = {
            "id": self.id,
            "type": self.type.value,
            "navTitle": self.nav_title,
            "title": self.title,
        }
        if self.subtitle is not None:
            result["subtitle"] = self.subtitle
        if self.min_select is not None:
            result["min"] = self.min_select
        if self.max_select is not None:
            result["max"] = self.max_select
        result["options"] = [o.to_dict() for o in self.options]
        return result

    @classmethod
    def from_dict(cls, data: Any, path: str = "question") -> "Question":
        data = _object(data, path)
        tag = _field(data, "type", str, path)
        try:
            qtype = QuestionType(tag)
        except ValueError:
            raise InvalidPayload(f"Unknown question type '{tag}' at '{_join(path, 'type')}'") from None

        options_path = _join(path, "options")
        options = tuple(
            option_from_dict(o, f"{options_path}[{i}]")
            for i, o in enumerate(_array(data, "options", path))
        )
        return cls(
            id=_field(data, "id", str, path),
            type=qtype,
            nav_title=_field(data, "navTitle", str, path),
            title=_field(data, "title", str, path),
            options=options,
            subtitle=_field(data, "subtitle", str, path, required=False),
            min_select=_field(data, "min", int, path, required=False),
            max_select=_field(data, "max", int, path, required=False),
        )


# =============================================================================
# QUIZ DEFINITION
# =============================================================================

@dataclass(frozen=True)
class QuizDefinition:
    """
    A complete quiz as delivered by remote config.

    Immutable once loaded; the flow state machine only reads it.
    """
    version: int
    questions: tuple[Question, ...] = field(default_factory=tuple)
    title: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.questions, tuple):
            object.__setattr__(self, "questions", tuple(self.questions))

    @property
    def question_count(self) -> int:
        return len(self.questions)

    @property
    def question_ids(self) -> list[str]:
        return [q.id for q in self.questions]

    def question(self, question_id: str) -> Optional[Question]:
        """Look up a question by id."""
        for q in self.questions:
            if q.id == question_id:
                return q
        return None

    def to_dict(self) -> dict:
        result: dict = {"version": self.version}
        if self.title is not None:
            result["title"] = self.title
        result["questions"] = [q.to_dict() for q in self.questions]
        return result

    @classmethod
    def from_dict(cls, data: Any) -> "QuizDefinition":
        data = _object(data, "")
        questions = tuple(
            Question.from_dict(q, f"questions[{i}]")
            for i, q in enumerate(_array(data, "questions", ""))
        )
        return cls(
            version=_field(data, "version", int, ""),
            questions=questions,
            title=_field(data, "title", str, "", required=False),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    def validate(self) -> tuple[bool, list[str]]:
        """
        Check the quiz for authoring mistakes the decoder lets through.

        Returns:
            Tuple of (is_valid, list of error messages)
        """
        errors = []
        seen_questions: set[str] = set()

        if not self.questions:
            errors.append("Quiz has no questions")

        for question in self.questions:
            if question.id in seen_questions:
                errors.append(f"Duplicate question id '{question.id}'")
            seen_questions.add(question.id)

            if not question.options:
                errors.append(f"Question '{question.id}' has no options")

            seen_options: set[str] = set()
            for opt in question.options:
                if opt.id in seen_options:
                    errors.append(f"Duplicate option id '{opt.id}' in question '{question.id}'")
                seen_options.add(opt.id)

            if (
                question.min_select is not None
                and question.max_select is not None
                and question.min_select > question.max_select
            ):
                errors.append(f"Question '{question.id}' has min greater than max")

        return (len(errors) == 0, errors)


def decode_quiz(payload: Union[bytes, str]) -> QuizDefinition:
    """
    Decode a UTF-8 JSON quiz payload.

    Raises:
        InvalidPayload: If the bytes are not JSON or do not match the schema
    """
    try:
        if isinstance(payload, bytes):
            payload = payload.decode("utf-8")
        data = json.loads(payload)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise InvalidPayload(f"Quiz payload is not valid JSON: {e}") from e

    return QuizDefinition.from_dict(data)


def encode_quiz(quiz: QuizDefinition) -> bytes:
    """Encode a quiz to UTF-8 JSON bytes."""
    return json.dumps(quiz.to_dict()).encode("utf-8")
