from .candidate import Candidate
from .exam import Exam
from .exam_access import ExamAccess
from .attempt import Attempt, AttemptStatus, NavigationMode, TERMINAL_STATUSES

__all__ = [
    "Candidate",
    "Exam",
    "ExamAccess",
    "Attempt",
    "AttemptStatus",
    "NavigationMode",
    "TERMINAL_STATUSES",
]
