"""
IELTS assignment configuration domain model.

Pure, synchronous building blocks: the config and question unions, default
factories, the normalizer that repairs persisted configs, and question type
transitions.
"""

from src.ielts.assignment_config import (
    AssignmentConfig,
    ListeningConfig,
    ReadingConfig,
    SpeakingConfig,
    WritingConfig,
    create_assignment_config,
    parse_assignment_config,
)
from src.ielts.normalizer import normalize_assignment_config, normalize_question
from src.ielts.questions import Question, create_question, parse_question
from src.ielts.transitions import change_question_type
from src.ielts.types import AssignmentType, CompletionFormat, QuestionType

__all__ = [
    "AssignmentConfig",
    "AssignmentType",
    "CompletionFormat",
    "ListeningConfig",
    "Question",
    "QuestionType",
    "ReadingConfig",
    "SpeakingConfig",
    "WritingConfig",
    "change_question_type",
    "create_assignment_config",
    "create_question",
    "normalize_assignment_config",
    "normalize_question",
    "parse_assignment_config",
    "parse_question",
]
