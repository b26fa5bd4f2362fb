"""Side-by-side part comparison"""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from ..schemas import Part


MAX_COMPARE = 4

COMPARE_FIELDS: Dict[str, List[Tuple[str, str]]] = {
    "cpu": [
        ("brand", "Brand"), ("socket", "Socket"),
        ("cores", "Cores"), ("threads", "Threads"),
        ("base", "Base Clock (GHz)"), ("boost", "Boost Clock (GHz)"),
        ("tdp", "TDP (W)"), ("price", "Price ($)"),
    ],
    "gpu": [
        ("brand", "Brand"), ("vram", "VRAM (GB)"),
        ("base_clock", "Base Clock (MHz)"), ("boost_clock", "Boost Clock (MHz)"),
        ("tdp", "TDP (W)"), ("price", "Price ($)"),
    ],
    "ram": [
        ("brand", "Brand"), ("type", "Type"),
        ("speed", "Speed (MHz)"), ("capacity", "Capacity (GB)"),
        ("price", "Price ($)"),
    ],
    "motherboard": [
        ("brand", "Brand"), ("socket", "Socket"),
        ("form_factor", "Form Factor"), ("ram_type", "RAM Type"),
        ("price", "Price ($)"),
    ],
    "storage": [
        ("brand", "Brand"), ("type", "Type"),
        ("capacity", "Capacity"), ("read", "Read (MB/s)"),
        ("write", "Write (MB/s)"), ("iface", "Interface"),
        ("price", "Price ($)"),
    ],
    "psu": [
        ("brand", "Brand"), ("wattage", "Wattage (W)"),
        ("efficiency", "Efficiency"), ("modular", "Modular"),
        ("price", "Price ($)"),
    ],
    "case": [
        ("brand", "Brand"), ("form_factor", "Form Factor"),
        ("color", "Color"), ("price", "Price ($)"),
    ],
    "cooler": [
        ("brand", "Brand"), ("type", "Type"),
        ("tdp_capacity", "Max TDP (W)"), ("price", "Price ($)"),
    ],
}

HIGHER_IS_BETTER = {
    "cores", "threads", "base", "boost", "vram", "base_clock", "boost_clock",
    "speed", "capacity", "read", "write", "wattage", "tdp_capacity",
}
LOWER_IS_BETTER = {"tdp", "price"}


def compare_fields(category: str) -> List[Tuple[str, str]]:
    return COMPARE_FIELDS.get(category, [])


def _as_number(value) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def best_index(parts: Sequence["Part"], key: str) -> int:
    """
    Index of the part with the best value for ``key``.

    Returns -1 when the key is not ranked or any value is not numeric.
    Ties go to the first part.
    """
    if not parts:
        return -1
    values = [_as_number(getattr(part, key, None)) for part in parts]
    if any(value is None for value in values):
        return -1
    if key in HIGHER_IS_BETTER:
        return values.index(max(values))
    if key in LOWER_IS_BETTER:
        return values.index(min(values))
    return -1


def compare_table(parts: Sequence["Part"], category: str) -> List[dict]:
    """Rows of ``{key, label, values, best}`` for the compare view."""
    parts = list(parts)[:MAX_COMPARE]
    return [
        {
            "key": key,
            "label": label,
            "values": [getattr(part, key, None) for part in parts],
            "best": best_index(parts, key),
        }
        for key, label in compare_fields(category)
    ]
