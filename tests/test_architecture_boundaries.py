from __future__ import annotations

import re
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parents[1]
PACKAGE_DIR = PROJECT_ROOT / "hireperfect"
COMPONENTS_DIR = PACKAGE_DIR / "components"
DOMAINS_DIR = PACKAGE_DIR / "domains"


def _python_files(root: Path) -> list[Path]:
    return sorted(path for path in root.rglob("*.py") if path.is_file())


def test_components_do_not_import_transport_layer() -> None:
    disallowed = re.compile(r"(?:from|import)\s+(?:hireperfect|\.+)\.?(?:domains|main|deps)\b")
    violations: list[str] = []
    for path in _python_files(COMPONENTS_DIR):
        content = path.read_text(encoding="utf-8")
        if disallowed.search(content) or "fastapi" in content:
            violations.append(str(path))
    assert not violations, f"components must stay free of HTTP/transport imports: {violations}"


def test_routes_do_not_touch_attempt_repository_directly() -> None:
    pattern = re.compile(r"(?:from|import)\s+.*components\.assessments\.repository\b")
    violations: list[str] = []
    for path in _python_files(DOMAINS_DIR):
        if pattern.search(path.read_text(encoding="utf-8")):
            violations.append(str(path))
    assert not violations, (
        "Route modules must go through the assessments service, not the attempt store. "
        f"Violations: {violations}"
    )


def test_attempt_status_only_assigned_in_lifecycle_service() -> None:
    pattern = re.compile(r"\.status\s*=\s*(?!=)")
    allowed = {COMPONENTS_DIR / "assessments" / "service.py"}
    violations: list[str] = []
    for path in _python_files(PACKAGE_DIR):
        if path in allowed:
            continue
        if pattern.search(path.read_text(encoding="utf-8")):
            violations.append(str(path))
    assert not violations, f"Attempt status transitions must live in the lifecycle service: {violations}"


def test_candidate_question_views_never_reference_answer_key() -> None:
    routes = _python_files(DOMAINS_DIR)
    violations = [str(p) for p in routes if "correct_option_id" in p.read_text(encoding="utf-8")]
    assert not violations, f"Route modules must not handle the answer key: {violations}"
