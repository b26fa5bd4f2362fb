"""Builder module: compatibility rules, power budget and part picking"""

from .compatibility import check_compatibility, item_compat_status, slot_states
from .power import PowerBudget, estimate_power, psu_load_percent
from .picker import Page, paginate, pick_candidates, search_parts
from .compare import best_index, compare_table

__all__ = [
    "check_compatibility",
    "item_compat_status",
    "slot_states",
    "PowerBudget",
    "estimate_power",
    "psu_load_percent",
    "Page",
    "paginate",
    "pick_candidates",
    "search_parts",
    "best_index",
    "compare_table",
]
