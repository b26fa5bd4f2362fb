"""
Power Budget Module

Estimate system power draw from the selected CPU and GPU plus a fixed
allowance for everything else. The compatibility rules use the same
constants and the same ``estimated_draw`` function.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from ..schemas import PowerBudget

if TYPE_CHECKING:
    from ..schemas import Build, Number, Part


SYSTEM_OVERHEAD_W = 75
"""
Baseline draw for motherboard, memory, storage and fans (W).
Not derived from any selected part.
"""

PSU_SAFETY_MARGIN_W = 100
"""PSU capacity above the estimated draw below which a warning is raised (W)."""

THERMAL_HEADROOM_RATIO = 0.85
"""CPU TDP above this share of cooler capacity triggers a headroom warning."""


def _draw(part: "Part | None") -> "Number":
    # missing parts and missing tdp both count as zero
    if part is None:
        return 0
    return part.tdp or 0


def estimate_power(build: "Build") -> PowerBudget:
    """
    Estimate Power

    Parameters:
        build: build snapshot, any number of slots filled

    Returns:
        per-contributor draw and total in watts
    """
    return PowerBudget(
        cpu_draw=_draw(build.cpu),
        gpu_draw=_draw(build.gpu),
        system_overhead=SYSTEM_OVERHEAD_W,
    )


def estimated_draw(build: "Build") -> "Number":
    return estimate_power(build).total


def psu_load_percent(build: "Build") -> int:
    """Share of PSU capacity used by the estimated draw, capped at 100."""
    psu = build.psu
    if psu is None or not psu.wattage:
        return 0
    # halves round up: 12.5% reads as 13
    return min(100, math.floor(estimated_draw(build) / psu.wattage * 100 + 0.5))
