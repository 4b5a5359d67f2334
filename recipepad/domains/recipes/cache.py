"""
Read-through cache for the global recipe listing.

The listing is served from a single process-wide entry for ``ttl`` seconds
after it was captured. Every write to the global collection invalidates the
entry, so the next read always goes back to the database.

Entity tags are derived from the row count and the newest ``updated_at``
(``"r<count>-<epoch millis>"``). This is cheap but not collision-proof: a
delete followed by an insert that restores the same count with an older
timestamp produces the same tag.
"""

import json
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from email.utils import format_datetime
from enum import Enum
from typing import Callable, Optional, Sequence

from recipepad.domains.recipes.entities import Recipe

CACHE_CONTROL = "public, max-age=30, stale-while-revalidate=300"

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class CacheEntry:
    body: str = ""
    etag: str = ""
    last_modified: str = ""
    captured_at: float = 0.0

    @property
    def is_empty(self) -> bool:
        return not self.body

    @property
    def headers(self) -> dict:
        return {
            "ETag": self.etag,
            "Last-Modified": self.last_modified,
            "Cache-Control": CACHE_CONTROL,
        }


EMPTY_ENTRY = CacheEntry()


def epoch_millis(moment: datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return (moment - _EPOCH) // timedelta(milliseconds=1)


def make_etag(count: int, latest: datetime) -> str:
    return f'"r{count}-{epoch_millis(latest)}"'


def http_date(moment: datetime) -> str:
    """IMF-fixdate, например ``Sun, 06 Nov 1994 08:49:37 GMT``"""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return format_datetime(moment.astimezone(timezone.utc), usegmt=True)


def serialize_listing(recipes: Sequence[Recipe]) -> str:
    payload = [recipe.to_payload() for recipe in recipes]
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))


def build_entry(
    recipes: Sequence[Recipe],
    captured_at: float,
    now: Optional[datetime] = None
) -> CacheEntry:
    """Снимок списка рецептов; ``recipes`` отсортированы по updated_at desc"""
    if recipes and recipes[0].updated_at is not None:
        latest = recipes[0].updated_at
    else:
        latest = now or datetime.now(timezone.utc)

    return CacheEntry(
        body=serialize_listing(recipes),
        etag=make_etag(len(recipes), latest),
        last_modified=http_date(latest),
        captured_at=captured_at,
    )


class ListingOutcome(Enum):
    FULL = 200
    NOT_MODIFIED = 304


@dataclass(frozen=True)
class ListingResult:
    outcome: ListingOutcome
    entry: CacheEntry
    from_cache: bool

    @property
    def not_modified(self) -> bool:
        return self.outcome is ListingOutcome.NOT_MODIFIED


def negotiate(entry: CacheEntry, client_etag: Optional[str], from_cache: bool) -> ListingResult:
    """Условный ответ: совпадение тега без нормализации даёт 304"""
    if client_etag and client_etag == entry.etag:
        return ListingResult(ListingOutcome.NOT_MODIFIED, entry, from_cache)
    return ListingResult(ListingOutcome.FULL, entry, from_cache)


class ListingCache:
    """Единственный слот кэша списка глобальных рецептов.

    Слот всегда содержит неизменяемый :class:`CacheEntry` и заменяется только
    целиком. ``generation`` увеличивается при каждой инвалидации: чтение,
    начавшее запрос к БД до записи, не сохранит свой устаревший снимок после неё.
    """

    def __init__(self, ttl: float = 15.0, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._entry = EMPTY_ENTRY
        self._generation = 0

    @property
    def entry(self) -> CacheEntry:
        return self._entry

    @property
    def generation(self) -> int:
        return self._generation

    def now(self) -> float:
        return self._clock()

    def fresh_entry(self) -> Optional[CacheEntry]:
        entry = self._entry
        if entry.is_empty:
            return None
        if self._clock() - entry.captured_at >= self.ttl:
            return None
        return entry

    def store(self, entry: CacheEntry, generation: int) -> bool:
        if generation != self._generation:
            return False
        self._entry = entry
        return True

    def invalidate(self) -> None:
        self._generation += 1
        self._entry = EMPTY_ENTRY

    def __repr__(self) -> str:
        return f"ListingCache(ttl={self.ttl}, generation={self._generation}, empty={self._entry.is_empty})"
