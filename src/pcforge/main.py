from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from .builder.compare import MAX_COMPARE, compare_table
from .builder.compatibility import item_compat_status
from .builder.picker import paginate, search_parts
from .db import PartsRepository
from .errors import PCForgeError, UnknownCategoryError
from .observability import setup_logging
from .schemas import (
    CATEGORIES,
    CATEGORY_LABELS,
    Build,
    CheckRequest,
    FreeModeRequest,
    LoadRequest,
    SelectRequest,
)
from .service import BuildService, summarize
from .share import export_text

ROOT = Path(__file__).resolve().parents[2]

load_dotenv(ROOT / ".env")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if not raw:
        return default
    return [item.strip() for item in raw.split(",") if item.strip()]


CATALOG_PATH = Path(os.getenv("PCFORGE_CATALOG_PATH", str(ROOT / "data" / "parts.json")))
LOG_LEVEL = os.getenv("PCFORGE_LOG_LEVEL", "INFO").strip()
DEFAULT_PER_PAGE = max(1, _env_int("PCFORGE_DEFAULT_PER_PAGE", 25))
SESSION_TTL_SECONDS = _env_int("PCFORGE_SESSION_TTL_SECONDS", 7 * 24 * 3600)
SESSION_CLEANUP_INTERVAL_SECONDS = max(1, _env_int("PCFORGE_SESSION_CLEANUP_INTERVAL_SECONDS", 3600))
CORS_ORIGINS = _env_list("PCFORGE_CORS_ORIGINS", ["*"])

setup_logging(LOG_LEVEL)
logger = logging.getLogger(__name__)

repo = PartsRepository(CATALOG_PATH)
service = BuildService(
    repo,
    default_per_page=DEFAULT_PER_PAGE,
    session_ttl_seconds=SESSION_TTL_SECONDS,
    session_cleanup_interval_seconds=SESSION_CLEANUP_INTERVAL_SECONDS,
)

app = FastAPI(title="PCForge")
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PCForgeError)
async def pcforge_error_handler(request: Request, exc: PCForgeError):
    logger.warning("%s on %s: %s", exc.code, request.url.path, exc.message)
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


def _require_category(category: str) -> None:
    if category not in CATEGORIES:
        raise UnknownCategoryError(category)


def _summary(session_id: str) -> dict:
    return service.summary(session_id).model_dump(by_alias=True)


@app.get("/api/categories")
def list_categories():
    return [
        {"id": category, "label": CATEGORY_LABELS[category], "count": len(repo.by_category(category))}
        for category in CATEGORIES
    ]


@app.get("/api/parts/{category}")
def list_parts(
    category: str,
    q: str = "",
    brand: str = "",
    sort: str = "price-asc",
    page: int = 1,
    per_page: Optional[int] = Query(default=None, alias="perPage"),
):
    _require_category(category)
    matched = search_parts(repo.by_category(category), query=q, brand=brand, sort=sort)
    current = paginate(matched, page=page, per_page=per_page or DEFAULT_PER_PAGE)
    return {
        "items": [p.model_dump(by_alias=True) for p in current.items],
        "brands": repo.brands(category),
        **current.to_dict(),
    }


@app.get("/api/parts/{category}/{part_id}")
def get_part(category: str, part_id: str):
    return service.find_part(category, part_id).model_dump(by_alias=True)


@app.post("/api/check")
def check(payload: CheckRequest):
    build = Build()
    for category, part_id in payload.parts.items():
        build = build.overlay(category, service.find_part(category, part_id))
    return summarize(build).model_dump(by_alias=True)


@app.get("/api/builds/{session_id}")
def get_build(session_id: str):
    return _summary(session_id)


@app.delete("/api/builds/{session_id}")
def clear_build(session_id: str):
    service.clear(session_id)
    return _summary(session_id)


@app.put("/api/builds/{session_id}/free-mode")
def set_free_mode(session_id: str, payload: FreeModeRequest):
    service.set_free_mode(session_id, payload.enabled)
    return _summary(session_id)


@app.get("/api/builds/{session_id}/share")
def share_build(session_id: str):
    return {"build": service.share(session_id)}


@app.post("/api/builds/{session_id}/load")
def load_build(session_id: str, payload: LoadRequest):
    service.load(session_id, payload.build)
    return _summary(session_id)


@app.post("/api/builds/{session_id}/add")
def add_to_build(session_id: str, add: str):
    service.add_from_param(session_id, add)
    return _summary(session_id)


@app.get("/api/builds/{session_id}/export", response_class=PlainTextResponse)
def export_build(session_id: str):
    return export_text(service.get_session(session_id).build)


@app.get("/api/builds/{session_id}/candidates/{category}")
def list_candidates(
    session_id: str,
    category: str,
    q: str = "",
    brand: str = "",
    sort: str = "price-asc",
    page: int = 1,
    per_page: Optional[int] = Query(default=None, alias="perPage"),
):
    candidates, current = service.candidates(
        session_id, category, query=q, brand=brand, sort=sort, page=page, per_page=per_page
    )
    return {
        "items": [c.model_dump(by_alias=True) for c in candidates],
        "freeMode": service.get_session(session_id).free_mode,
        **current.to_dict(),
    }


@app.put("/api/builds/{session_id}/{category}")
def select_part(session_id: str, category: str, payload: SelectRequest):
    service.select(session_id, category, payload.part_id)
    return _summary(session_id)


@app.delete("/api/builds/{session_id}/{category}")
def remove_part(session_id: str, category: str):
    service.remove(session_id, category)
    return _summary(session_id)


@app.get("/api/compare/{category}")
def compare(
    category: str,
    ids: List[str] = Query(default=[]),
    session_id: Optional[str] = Query(default=None, alias="sessionId"),
):
    _require_category(category)
    parts = [service.find_part(category, part_id) for part_id in ids[:MAX_COMPARE]]
    body = {
        "parts": [p.model_dump(by_alias=True) for p in parts],
        "rows": compare_table(parts, category),
    }
    if session_id is not None:
        session = service.get_session(session_id)
        body["compat"] = [
            item_compat_status(session.build, category, p, session.free_mode) for p in parts
        ]
    return body
