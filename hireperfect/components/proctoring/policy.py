"""Violation classification for client-reported proctoring events."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import FrozenSet

from ...platform.config import settings


class ViolationType(str, enum.Enum):
    FACE_MISSING = "face_missing"
    EYE_MOVEMENT = "eye_movement"
    HEAD_MOVEMENT = "head_movement"
    TAB_SWITCH = "tab_switch"
    SCREEN_MINIMIZE = "screen_minimize"
    FULLSCREEN_EXIT = "fullscreen_exit"
    COPY_PASTE_ATTEMPT = "copy_paste_attempt"
    RIGHT_CLICK_ATTEMPT = "right_click_attempt"
    SCREEN_CAPTURE_ATTEMPT = "screen_capture_attempt"


class Severity(str, enum.Enum):
    WARNING = "warning"
    CRITICAL = "critical"


CRITICAL_TERMINATION_MESSAGE = "Assessment terminated due to tab switch/minimize"


@dataclass(frozen=True)
class Classification:
    severity: Severity
    message: str

    @property
    def is_critical(self) -> bool:
        return self.severity == Severity.CRITICAL


def critical_violation_types() -> FrozenSet[ViolationType]:
    return frozenset(ViolationType(value) for value in settings.critical_violation_types)


def classify(violation_type: ViolationType | str) -> Classification:
    """Map a violation type to its severity and human-readable message.

    Raises ``ValueError`` for a type outside the enumeration.
    """
    vtype = ViolationType(violation_type)
    if vtype in critical_violation_types():
        return Classification(severity=Severity.CRITICAL, message=CRITICAL_TERMINATION_MESSAGE)
    return Classification(severity=Severity.WARNING, message=f"Warning issued for {vtype.value}")


def remaining_warnings(warnings_count: int, limit: int | None = None) -> int:
    limit = settings.MAX_PROCTORING_WARNINGS if limit is None else limit
    return max(0, limit - warnings_count)
