"""
Compatibility Rules Module

Each rule is an independent unit that inspects a read-only build and emits
at most one issue. ``RULES`` fixes the evaluation order, which is also the
order issues are reported in.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple, TYPE_CHECKING

from ..schemas import Issue
from .power import PSU_SAFETY_MARGIN_W, THERMAL_HEADROOM_RATIO, estimated_draw

if TYPE_CHECKING:
    from ..schemas import Build


FORM_FACTOR_RANK: Dict[str, int] = {
    "mATX": 1,
    "ATX": 2,
    "E-ATX": 3,
}
"""
Board size order. A case fits any board of equal or smaller rank.
"""

DEFAULT_FORM_FACTOR_RANK = 2
"""
Unrecognized form factors rank as ATX, so they neither block an ATX-class
partner nor raise a mismatch on their own.
"""


@dataclass(frozen=True)
class Rule:
    name: str
    # builder rows flagged when this rule fires
    categories: Tuple[str, ...]
    check: Callable[["Build"], Optional[Issue]]


def form_factor_rank(form_factor: str) -> int:
    return FORM_FACTOR_RANK.get(form_factor, DEFAULT_FORM_FACTOR_RANK)


def check_socket(build: "Build") -> Optional[Issue]:
    cpu, motherboard = build.cpu, build.motherboard
    if cpu is None or motherboard is None:
        return None
    if cpu.socket != motherboard.socket:
        return Issue(
            severity="error",
            rule="socket",
            message=(
                f"CPU socket ({cpu.socket}) doesn't match "
                f"motherboard socket ({motherboard.socket})"
            ),
        )
    return None


def check_memory_type(build: "Build") -> Optional[Issue]:
    ram, motherboard = build.ram, build.motherboard
    if ram is None or motherboard is None:
        return None
    if ram.type != motherboard.ram_type:
        return Issue(
            severity="error",
            rule="memory_type",
            message=(
                f"RAM type ({ram.type}) is incompatible with "
                f"motherboard (supports {motherboard.ram_type})"
            ),
        )
    return None


def check_thermal(build: "Build") -> Optional[Issue]:
    cpu, cooler = build.cpu, build.cooler
    if cpu is None or cooler is None or cooler.tdp_capacity is None:
        return None
    if cpu.tdp > cooler.tdp_capacity:
        return Issue(
            severity="error",
            rule="thermal",
            message=(
                f"CPU TDP ({cpu.tdp}W) exceeds cooler capacity "
                f"({cooler.tdp_capacity}W)"
            ),
        )
    if cpu.tdp > cooler.tdp_capacity * THERMAL_HEADROOM_RATIO:
        return Issue(
            severity="warning",
            rule="thermal",
            message=(
                f"CPU TDP ({cpu.tdp}W) is close to cooler limit "
                f"({cooler.tdp_capacity}W), consider headroom"
            ),
        )
    return None


def check_power(build: "Build") -> Optional[Issue]:
    psu = build.psu
    if psu is None or psu.wattage is None or (build.cpu is None and build.gpu is None):
        return None
    estimated = estimated_draw(build)
    if psu.wattage < estimated:
        return Issue(
            severity="error",
            rule="power",
            message=(
                f"PSU ({psu.wattage}W) insufficient, "
                f"estimated system draw ~{estimated}W"
            ),
        )
    if psu.wattage < estimated + PSU_SAFETY_MARGIN_W:
        return Issue(
            severity="warning",
            rule="power",
            message=(
                f"PSU headroom is tight ({psu.wattage}W vs ~{estimated}W needed), "
                "consider a higher wattage"
            ),
        )
    return None


def check_form_factor(build: "Build") -> Optional[Issue]:
    case, motherboard = build.case, build.motherboard
    if case is None or motherboard is None:
        return None
    if form_factor_rank(case.form_factor) < form_factor_rank(motherboard.form_factor):
        return Issue(
            severity="error",
            rule="form_factor",
            message=(
                f"Case ({case.form_factor}) is too small for "
                f"motherboard ({motherboard.form_factor})"
            ),
        )
    return None


RULES: Tuple[Rule, ...] = (
    Rule("socket", ("cpu", "motherboard"), check_socket),
    Rule("memory_type", ("ram", "motherboard"), check_memory_type),
    Rule("thermal", ("cpu", "cooler"), check_thermal),
    Rule("power", ("psu",), check_power),
    Rule("form_factor", ("case", "motherboard"), check_form_factor),
)

RULE_CATEGORIES: Dict[str, Tuple[str, ...]] = {rule.name: rule.categories for rule in RULES}
