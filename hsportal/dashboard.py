"""Cached aggregate reads for the dashboard.

Dashboard widgets poll aggregate endpoints far more often than the
underlying rows change, so results are kept in Redis for a short time.
Reads go to the cache first; on a miss the rows are loaded from the
database, serialized and written back in the background.

Cache keys have the form ``dashboard:<resource>:<start>:<end>`` where a
missing bound is spelled ``all``.  Start and end filter independently, both
in the key and in the query.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, time, timezone
from typing import Any, Callable, Mapping, Optional

from flask import Blueprint, Response, current_app, jsonify, request

from hsportal.auth import login_required

logger = logging.getLogger(__name__)

CACHE_NAMESPACE = "dashboard"
ACHIEVEMENT_RATES = "achievement-rates"
DEFAULT_TTL = 120

dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/api/dashboard")


class InvalidDateRange(ValueError):
    """Raised when a date filter cannot be parsed."""


class SourceUnavailableError(RuntimeError):
    """Raised when the system of record could not be queried."""


def _parse_bound(raw: Optional[str]) -> Optional[datetime]:
    if raw is None or not raw.strip():
        return None
    try:
        value = datetime.fromisoformat(raw.strip())
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
    except (ValueError, OverflowError) as exc:
        raise InvalidDateRange(f"Invalid date: {raw!r}") from exc
    return value


def _key_part(value: Optional[datetime]) -> str:
    if value is None:
        return "all"
    if value.time() == time.min:
        return value.date().isoformat()
    return value.isoformat()


@dataclass(frozen=True)
class DateRange:
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    @classmethod
    def from_args(cls, args: Mapping[str, str]) -> "DateRange":
        return cls(
            start=_parse_bound(args.get("startDate")),
            end=_parse_bound(args.get("endDate")),
        )


def build_cache_key(resource: str, date_range: DateRange) -> str:
    return ":".join(
        [CACHE_NAMESPACE, resource, _key_part(date_range.start), _key_part(date_range.end)]
    )


class AggregateReadCache:
    """Cache-aside reader for one dashboard resource.

    ``loader`` is called as ``loader(start, end)`` and must return JSON
    serializable data.  ``dispatch`` schedules the cache write; it defaults to
    running the write inline.
    """

    def __init__(
        self,
        store,
        loader: Callable[[Optional[datetime], Optional[datetime]], Any],
        resource: str,
        ttl: int = DEFAULT_TTL,
        dispatch: Optional[Callable[..., Any]] = None,
    ) -> None:
        self.store = store
        self.loader = loader
        self.resource = resource
        self.ttl = ttl
        self.dispatch = dispatch

    def _read(self, key: str) -> Optional[str]:
        try:
            return self.store.get(key)
        except Exception:
            logger.warning("Cache read failed for %s, falling back to database", key, exc_info=True)
            return None

    def _write(self, key: str, payload: str) -> None:
        try:
            self.store.set(key, payload, self.ttl)
        except Exception:
            logger.warning("Cache write failed for %s", key, exc_info=True)

    def get(self, date_range: DateRange) -> str:
        key = build_cache_key(self.resource, date_range)
        cached = self._read(key)
        if cached is not None:
            logger.debug("Cache hit for %s", key)
            return cached

        try:
            rows = self.loader(date_range.start, date_range.end)
        except Exception as exc:
            logger.exception("Loading %s failed", self.resource)
            raise SourceUnavailableError(f"Failed to load {self.resource}") from exc

        payload = json.dumps(rows)
        if self.dispatch is None:
            self._write(key, payload)
        else:
            try:
                self.dispatch(self._write, key, payload)
            except Exception:
                logger.warning("Could not schedule cache write for %s", key, exc_info=True)
        return payload


@dashboard_bp.get("/achievement-rates")
@login_required
def achievement_rates():
    reader: AggregateReadCache = current_app.extensions["portal"]["achievement_rates"]
    try:
        date_range = DateRange.from_args(request.args)
    except InvalidDateRange:
        return jsonify(error="Invalid date range"), 400
    try:
        payload = reader.get(date_range)
    except SourceUnavailableError:
        return jsonify(error="Failed to fetch achievement rates"), 500
    return Response(
        payload,
        status=200,
        mimetype="application/json",
        headers={"Cache-Control": f"public, max-age={reader.ttl}"},
    )
