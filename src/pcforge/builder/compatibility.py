"""Compatibility checking module"""

from __future__ import annotations

from typing import Dict, List, Optional, TYPE_CHECKING

from ..schemas import CATEGORIES, Issue
from .rules import RULE_CATEGORIES, RULES

if TYPE_CHECKING:
    from ..schemas import Build, CompatStatus, Part, SlotState


NO_ISSUES_MESSAGE = "No compatibility issues detected"


def check_compatibility(build: "Build") -> List[Issue]:
    """
    Check hardware compatibility of a build snapshot.

    Every rule runs in ``RULES`` order; a rule whose parts are not both
    selected is skipped. When nothing fired and at least one slot is filled
    a single ``ok`` issue confirms the build.

    Args:
        build: build snapshot, never modified

    Returns:
        issues in rule order, empty for an empty build
    """
    issues: List[Issue] = []
    for rule in RULES:
        issue = rule.check(build)
        if issue is not None:
            issues.append(issue)

    if not issues and not build.is_empty():
        issues.append(Issue(severity="ok", rule="complete", message=NO_ISSUES_MESSAGE))

    return issues


def item_compat_status(
    build: "Build",
    category: str,
    candidate: "Part",
    free_mode: bool = False,
) -> "CompatStatus":
    """
    Classify a candidate part against the current build.

    The candidate replaces whatever occupies ``category`` in a throwaway
    copy of the build; the build passed in is left untouched.

    Args:
        build: authoritative build
        category: slot the candidate would fill
        candidate: catalog part under consideration
        free_mode: compatibility filtering disabled

    Returns:
        ``free`` in free mode, otherwise ``incompat`` / ``warn`` / ``ok``
    """
    if free_mode:
        return "free"

    issues = check_compatibility(build.overlay(category, candidate))
    if any(issue.severity == "error" for issue in issues):
        return "incompat"
    if any(issue.severity == "warning" for issue in issues):
        return "warn"
    return "ok"


def slot_states(
    build: "Build",
    issues: Optional[List[Issue]] = None,
) -> Dict[str, "SlotState"]:
    """Per-slot state for the builder rows, derived from which rules fired."""
    if issues is None:
        issues = check_compatibility(build)

    states: Dict[str, "SlotState"] = {}
    for category in CATEGORIES:
        if build.get(category) is None:
            states[category] = ""
            continue
        involved = [
            issue for issue in issues
            if category in RULE_CATEGORIES.get(issue.rule, ())
        ]
        if any(issue.severity == "error" for issue in involved):
            states[category] = "error"
        elif any(issue.severity == "warning" for issue in involved):
            states[category] = "warn"
        else:
            states[category] = "selected"
    return states
