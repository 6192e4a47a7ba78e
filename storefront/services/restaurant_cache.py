"""
Restaurant Lookup Cache

Maps the short hash fragment carried by a restaurant slug back to the full
restaurant record (menu included) produced by a nearby search.

Shareable URLs only carry ``<name-slug>-<hash>``, so a slug visited after
the entry has expired, been evicted, or was never cached in this process
is answered with a placeholder rebuilt from the slug text. That placeholder
is best effort and may not match the restaurant the slug was made for.

Entries are bounded by count (least recently used evicted first) and by age.

Version: 1.0.0
"""

import logging
import random
import threading
import time
from collections import OrderedDict
from typing import Callable, Iterable, Optional

from storefront.schemas import Coordinates, Restaurant
from storefront.services import catalog
from storefront.services.fallback import PLACEHOLDER_HERO_IMAGE

logger = logging.getLogger(__name__)


class RestaurantCache:
    """
    TTL-aware LRU cache of restaurants keyed by hash fragment.

    Attributes:
        max_entries: Entries kept before the least recently used is evicted
        ttl_seconds: Age after which an entry is no longer returned

    Example:
        >>> cache = RestaurantCache()
        >>> cache.put([restaurant])
        >>> cache.resolve_slug("pizza-corner-XYZ456") == restaurant
        True
    """

    def __init__(
        self,
        max_entries: int = 500,
        ttl_seconds: float = 6 * 60 * 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")

        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: OrderedDict[str, tuple[float, Restaurant]] = OrderedDict()
        self._lock = threading.RLock()

    def put(self, records: Iterable[Restaurant]) -> int:
        """
        Cache restaurants under the last six characters of their id.

        A record whose hash collides with an existing entry overwrites it.

        Returns:
            int: Number of records cached
        """
        count = 0
        now = self._clock()

        with self._lock:
            for record in records:
                key = catalog.hash_fragment(record.id)
                if key in self._entries:
                    self._entries.move_to_end(key)
                self._entries[key] = (now, record)
                count += 1

                while len(self._entries) > self.max_entries:
                    evicted, _ = self._entries.popitem(last=False)
                    logger.debug(f"Evicted restaurant {evicted} from cache")

        logger.info(f"Cached {count} restaurants ({len(self)} total)")
        return count

    def get(self, fragment: str) -> Optional[Restaurant]:
        """Cached restaurant for a hash fragment, or None."""
        with self._lock:
            entry = self._entries.get(fragment)
            if entry is None:
                return None

            stored_at, record = entry
            if self._clock() - stored_at > self.ttl_seconds:
                del self._entries[fragment]
                logger.debug(f"Restaurant {fragment} expired from cache")
                return None

            self._entries.move_to_end(fragment)
            return record

    def resolve_slug(self, slug: str) -> Restaurant:
        """
        Resolve a restaurant slug.

        Returns the cached record when the hash is known, otherwise a
        placeholder rebuilt from the slug's name segments. Never raises.
        """
        name, fragment = catalog.split_slug(slug)

        # Place ids may contain "-", so the hash can span two segments.
        candidates = [fragment]
        tail = slug[-catalog.HASH_LENGTH:]
        if len(slug) > catalog.HASH_LENGTH and tail != fragment:
            candidates.append(tail)

        for candidate in candidates:
            cached = self.get(candidate)
            if cached is not None:
                logger.info(f"Slug {slug} resolved from cache: {cached.name}")
                return cached

        logger.warning(f"Slug {slug} not in cache; rebuilding from slug text")
        return self._reconstruct(slug, name, fragment)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, fragment: str) -> bool:
        return self.get(fragment) is not None

    @staticmethod
    def _reconstruct(slug: str, name: str, fragment: str) -> Restaurant:
        cuisine, menu_type = catalog.classify_name(name)

        return Restaurant(
            id=f"reconstructed_{fragment}",
            name=name,
            cuisine=cuisine,
            rating=round(4.0 + random.random(), 1),
            delivery_time=catalog.random_delivery_window(),
            delivery_fee=catalog.random_delivery_fee(),
            image=PLACEHOLDER_HERO_IMAGE,
            address="Restaurant Address, City, State",
            phone=catalog.random_phone(),
            is_open=True,
            coordinates=Coordinates(lat=0, lng=0),
            price_range=catalog.price_range(None),
            slug=slug,
            menu=catalog.build_menu(menu_type, name),
        )
