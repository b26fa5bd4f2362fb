"""PCForge: part compatibility checking and power budgeting for PC builds."""

from .builder import check_compatibility, estimate_power, item_compat_status
from .schemas import Build, Issue, Part, PowerBudget

__all__ = [
    "Build",
    "Issue",
    "Part",
    "PowerBudget",
    "check_compatibility",
    "estimate_power",
    "item_compat_status",
]
