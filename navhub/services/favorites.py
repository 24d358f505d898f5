from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Set

from .links.types import LinkGroup, LinkItem
from .storage import FAVORITES_KEY, LocalStateStore

logger = logging.getLogger(__name__)

FAVORITES_TITLE = "收藏"
FAVORITES_TITLE_EN = "Favorites"


class FavoritesStore:
    """Persisted set of link identity keys.

    Keys are stored as a sorted JSON list so that toggling a key twice
    restores the exact serialized value; an empty set removes the entry.
    Stale keys are kept; they never match.
    """

    def __init__(self, store: LocalStateStore) -> None:
        self.store = store

    def keys(self) -> Set[str]:
        raw = self.store.get_json(FAVORITES_KEY, default=[])
        if not isinstance(raw, list):
            logger.warning("favorites.malformed type=%s", type(raw).__name__)
            return set()
        return {item for item in raw if isinstance(item, str)}

    def contains(self, key: str) -> bool:
        return key in self.keys()

    def toggle_key(self, key: str) -> bool:
        """Flip membership of ``key`` and persist; returns the new membership."""
        if not key:
            logger.warning("favorites.empty_identity_key")
        keys = self.keys()
        if key in keys:
            keys.discard(key)
            added = False
        else:
            keys.add(key)
            added = True
        if keys:
            self.store.set_json(FAVORITES_KEY, sorted(keys))
        else:
            self.store.remove(FAVORITES_KEY)
        logger.info("favorites.toggled key=%s favorite=%s", key, added)
        return added

    def toggle(self, link: LinkItem) -> bool:
        return self.toggle_key(link.identity_key)


def build_favorites_group(groups: Iterable[LinkGroup], favorite_keys: Set[str]) -> Optional[LinkGroup]:
    """Collect favorited links across groups, first occurrence per identity key.

    Returns None when nothing matches so no empty section is shown.
    """
    picked: List[LinkItem] = []
    seen: Set[str] = set()
    for group in groups:
        for link in group.links:
            key = link.identity_key
            if key in favorite_keys and key not in seen:
                seen.add(key)
                picked.append(link)
    if not picked:
        return None
    return LinkGroup(title=FAVORITES_TITLE, title_en=FAVORITES_TITLE_EN, links=tuple(picked))
