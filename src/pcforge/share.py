"""Share links and plain-text export for builds.

A share link carries the build as URL-encoded JSON ``{category: part_id}``;
an ``add`` link carries a single ``category:part_id`` pair.
"""

from __future__ import annotations

import json
from typing import Optional, Tuple, TYPE_CHECKING
from urllib.parse import quote, unquote

from .errors import ShareLinkError
from .schemas import CATEGORIES, CATEGORY_LABELS, Build, Part

if TYPE_CHECKING:
    from .db import PartsRepository


EXPORT_TITLE = "PCForge Build Export"


def encode_build(build: Build) -> str:
    return quote(json.dumps(build.part_ids(), separators=(",", ":")))


def decode_build(raw: str, repo: "PartsRepository") -> Build:
    """
    Restore a build from a share link payload.

    Unknown categories and ids no longer in the catalog are skipped, so an
    old link still restores whatever it can.
    """
    try:
        ids = json.loads(unquote(raw))
    except json.JSONDecodeError as exc:
        raise ShareLinkError(f"share link is not valid JSON: {exc}") from exc
    if not isinstance(ids, dict):
        raise ShareLinkError("share link must encode an object of category to part id")

    build = Build()
    for category, part_id in ids.items():
        if category not in CATEGORIES or not isinstance(part_id, str):
            continue
        part = repo.find_by_id(category, part_id)
        if part is not None:
            build = build.overlay(category, part)
    return build


def parse_add_param(raw: str, repo: "PartsRepository") -> Optional[Tuple[str, Part]]:
    category, sep, part_id = raw.partition(":")
    if not sep or category not in CATEGORIES:
        return None
    part = repo.find_by_id(category, part_id)
    if part is None:
        return None
    return category, part


def _money(value) -> str:
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}"


def export_text(build: Build) -> str:
    lines = [EXPORT_TITLE, "=" * 40, ""]
    for category, part in build.selected().items():
        lines.append(f"{CATEGORY_LABELS[category]}: {part.title} — ${part.price}")
    lines.extend(["", f"Total: ${_money(build.total_price())}"])
    return "\n".join(lines)
