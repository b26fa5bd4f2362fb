from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from .builder.compatibility import check_compatibility, item_compat_status, slot_states
from .builder.picker import Page, paginate, pick_candidates, search_parts
from .builder.power import estimate_power, psu_load_percent
from .db import PartsRepository
from .errors import IncompatiblePartError, UnknownCategoryError, UnknownPartError
from .schemas import CATEGORIES, Build, BuildSummary, CandidateStatus, Part
from .share import decode_build, encode_build, parse_add_param

logger = logging.getLogger(__name__)


@dataclass
class BuildSession:
    build: Build = field(default_factory=Build)
    free_mode: bool = False


class BuildService:
    """Owns the authoritative build of every session.

    The engine only ever sees snapshots: each mutation replaces
    ``session.build`` with a new immutable ``Build`` under the session lock.
    """

    def __init__(
        self,
        repo: PartsRepository,
        default_per_page: int = 25,
        session_ttl_seconds: int | None = 7 * 24 * 3600,
        session_cleanup_interval_seconds: int = 3600,
    ):
        self.repo = repo
        self.default_per_page = default_per_page
        self.sessions: Dict[str, BuildSession] = {}
        self._sessions_lock = threading.Lock()
        self._session_locks: Dict[str, threading.Lock] = {}
        self._session_last_seen: Dict[str, float] = {}
        self._cleanup_lock = threading.Lock()
        self._last_cleanup_monotonic = 0.0
        self.session_ttl_seconds = max(0, int(session_ttl_seconds or 0))
        self.session_cleanup_interval_seconds = max(1, int(session_cleanup_interval_seconds))

    def _get_session_lock(self, session_id: str) -> threading.Lock:
        self._cleanup_in_memory_cache()
        with self._sessions_lock:
            lock = self._session_locks.get(session_id)
            if lock is None:
                lock = threading.Lock()
                self._session_locks[session_id] = lock
            return lock

    def get_session(self, session_id: str) -> BuildSession:
        """Current session state; unknown ids read as an empty build and are not stored."""
        with self._sessions_lock:
            session = self.sessions.get(session_id)
        return session if session is not None else BuildSession()

    def _session_for_update(self, session_id: str) -> BuildSession:
        # caller holds the session lock
        with self._sessions_lock:
            session = self.sessions.get(session_id)
            if session is None:
                session = BuildSession()
                self.sessions[session_id] = session
            self._session_last_seen[session_id] = time.monotonic()
            return session

    def _cleanup_in_memory_cache(self, force: bool = False) -> None:
        if self.session_ttl_seconds <= 0:
            return
        now = time.monotonic()
        if not force and (now - self._last_cleanup_monotonic) < self.session_cleanup_interval_seconds:
            return
        with self._cleanup_lock:
            expire_before = now - float(self.session_ttl_seconds)
            with self._sessions_lock:
                stale = [sid for sid, seen in self._session_last_seen.items() if seen < expire_before]
                for sid in stale:
                    lock = self._session_locks.get(sid)
                    if lock is not None and lock.locked():
                        continue
                    self.sessions.pop(sid, None)
                    self._session_last_seen.pop(sid, None)
                    self._session_locks.pop(sid, None)
            self._last_cleanup_monotonic = now
            if stale:
                logger.debug("expired %d idle sessions", len(stale))

    def _require_category(self, category: str) -> None:
        if category not in CATEGORIES:
            raise UnknownCategoryError(category)

    def find_part(self, category: str, part_id: str) -> Part:
        self._require_category(category)
        part = self.repo.find_by_id(category, part_id)
        if part is None:
            raise UnknownPartError(category, part_id)
        return part

    def select(self, session_id: str, category: str, part_id: str) -> BuildSession:
        part = self.find_part(category, part_id)
        with self._get_session_lock(session_id):
            session = self._session_for_update(session_id)
            if not session.free_mode:
                status = item_compat_status(session.build, category, part)
                if status == "incompat":
                    reasons = [
                        issue.message
                        for issue in check_compatibility(session.build.overlay(category, part))
                        if issue.severity == "error"
                    ]
                    logger.info(
                        "session %s: blocked incompatible %s %s", session_id, category, part_id
                    )
                    raise IncompatiblePartError(category, part_id, reasons)
            session.build = session.build.overlay(category, part)
            logger.info("session %s: selected %s %s", session_id, category, part_id)
            return session

    def remove(self, session_id: str, category: str) -> BuildSession:
        self._require_category(category)
        with self._get_session_lock(session_id):
            session = self._session_for_update(session_id)
            session.build = session.build.overlay(category, None)
            logger.info("session %s: removed %s", session_id, category)
            return session

    def clear(self, session_id: str) -> BuildSession:
        with self._get_session_lock(session_id):
            session = self._session_for_update(session_id)
            session.build = session.build.cleared()
            logger.info("session %s: cleared build", session_id)
            return session

    def set_free_mode(self, session_id: str, enabled: bool) -> BuildSession:
        with self._get_session_lock(session_id):
            session = self._session_for_update(session_id)
            session.free_mode = enabled
            logger.debug("session %s: free mode %s", session_id, enabled)
            return session

    def load(self, session_id: str, encoded: str) -> BuildSession:
        """Merge a share link into the session build, keeping slots it does not name."""
        restored = decode_build(encoded, self.repo)
        with self._get_session_lock(session_id):
            session = self._session_for_update(session_id)
            build = session.build
            for category, part in restored.selected().items():
                build = build.overlay(category, part)
            session.build = build
            logger.info(
                "session %s: loaded %d parts from share link", session_id, len(restored.selected())
            )
            return session

    def add_from_param(self, session_id: str, raw: str) -> BuildSession:
        """Apply an ``add=category:id`` link; unknown pairs are ignored."""
        parsed = parse_add_param(raw, self.repo)
        with self._get_session_lock(session_id):
            session = self._session_for_update(session_id)
            if parsed is not None:
                category, part = parsed
                session.build = session.build.overlay(category, part)
            return session

    def share(self, session_id: str) -> str:
        return encode_build(self.get_session(session_id).build)

    def summary(self, session_id: str) -> BuildSummary:
        session = self.get_session(session_id)
        return summarize(session.build, free_mode=session.free_mode)

    def candidates(
        self,
        session_id: str,
        category: str,
        query: str = "",
        brand: str = "",
        sort: str = "price-asc",
        page: int = 1,
        per_page: int | None = None,
    ) -> Tuple[List[CandidateStatus], Page]:
        self._require_category(category)
        session = self.get_session(session_id)
        build, free_mode = session.build, session.free_mode
        matched = search_parts(self.repo.by_category(category), query=query, brand=brand, sort=sort)
        current = paginate(matched, page=page, per_page=per_page or self.default_per_page)
        return pick_candidates(build, category, current.items, free_mode), current


def summarize(build: Build, free_mode: bool = False) -> BuildSummary:
    issues = check_compatibility(build)
    return BuildSummary(
        build=build,
        issues=issues,
        power=estimate_power(build).to_dict(),
        psu_load_percent=psu_load_percent(build),
        total_price=build.total_price(),
        slot_states=slot_states(build, issues),
        free_mode=free_mode,
    )
