# SQLAlchemy models
from .base import Base
from .ielts_config import (
    IeltsAssignmentType,
    IeltsCompletionFormat,
    IeltsConfigVersion,
    IeltsQuestionOption,
    IeltsQuestionType,
    IeltsSampleTimingOption,
    IeltsSpeakingPartType,
    IeltsWritingTaskType,
)

__all__ = [
    # Base
    "Base",
    # Catalog versions
    "IeltsConfigVersion",
    # Catalog option tables
    "IeltsAssignmentType",
    "IeltsQuestionType",
    "IeltsWritingTaskType",
    "IeltsSpeakingPartType",
    "IeltsCompletionFormat",
    "IeltsSampleTimingOption",
    "IeltsQuestionOption",
]
