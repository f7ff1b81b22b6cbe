"""
Quiz system for quiz-onboarding

Handles the quiz definition schema and the flow state machine that walks it.
"""

from .schema import (
    QuestionType,
    OptionKind,
    TextOption,
    ImageOption,
    ColorOption,
    Option,
    Question,
    QuizDefinition,
    option_from_dict,
    decode_quiz,
    encode_quiz,
)
from .flow import QuizFlow

__all__ = [
    "QuestionType",
    "OptionKind",
    "TextOption",
    "ImageOption",
    "ColorOption",
    "Option",
    "Question",
    "QuizDefinition",
    "option_from_dict",
    "decode_quiz",
    "encode_quiz",
    "QuizFlow",
]
