"""
Favorite exit nodes and their on-disk store.

A favorite is either a single node or a location group. Activating a group
favorite rotates round-robin through its members, and the rotation cursor is
saved so it survives restarts.
"""

import json
import logging
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from .locations import LocationGroup
from .models import ExitNode

logger = logging.getLogger(__name__)

MAX_FAVORITES = 15


@dataclass
class Favorite:
    name: str  # display label
    node_id: str  # single node id, or first member of a group
    hostname: Optional[str] = None  # DNS name for the CLI
    order: int = 0
    is_group: bool = False
    location_key: Optional[str] = None  # e.g. "US-NYC"
    node_ids: List[str] = field(default_factory=list)
    current_index: int = 0  # round-robin cursor into node_ids
    favorite_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def __post_init__(self):
        if not self.node_ids:
            self.node_ids = [self.node_id]
        else:
            self.node_ids = list(self.node_ids)
        if not 0 <= self.current_index < len(self.node_ids):
            self.current_index = 0

    @property
    def hostname_or_fallback(self) -> str:
        return self.hostname or self.node_id

    def next_node_id(self) -> str:
        """
        Return the node to activate next.

        For a group this advances the cursor, so calling it len(node_ids)
        times yields every member once, in order, before repeating.
        """
        if not self.is_group:
            return self.node_id

        next_id = self.node_ids[self.current_index]
        self.current_index = (self.current_index + 1) % len(self.node_ids)
        return next_id

    def is_active(self, current_exit_node: Optional[str]) -> bool:
        if current_exit_node is None:
            return False
        if self.is_group:
            return current_exit_node in self.node_ids
        return current_exit_node == self.node_id

    @classmethod
    def from_node(cls, node: ExitNode, order: int = 0) -> "Favorite":
        return cls(
            name=node.display_name,
            node_id=node.id,
            hostname=node.dns_name,
            order=order,
        )

    @classmethod
    def from_group(cls, group: LocationGroup, order: int = 0) -> "Favorite":
        first = group.nodes[0]
        return cls(
            name=group.display_name,
            node_id=first.id,
            hostname=first.dns_name,
            order=order,
            is_group=group.has_multiple_nodes,
            location_key=group.key,
            node_ids=group.node_ids,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.favorite_id,
            "name": self.name,
            "node_id": self.node_id,
            "hostname": self.hostname,
            "order": self.order,
            "is_group": self.is_group,
            "location_key": self.location_key,
            "node_ids": list(self.node_ids),
            "current_index": self.current_index,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Favorite":
        node_ids = [str(n) for n in data.get("node_ids") or []]
        kwargs = dict(
            name=data["name"],
            node_id=data["node_id"],
            hostname=data.get("hostname"),
            order=int(data.get("order", 0)),
            is_group=bool(data.get("is_group", False)),
            location_key=data.get("location_key"),
            node_ids=node_ids,
            current_index=int(data.get("current_index", 0)),
        )
        if data.get("id"):
            kwargs["favorite_id"] = data["id"]
        return cls(**kwargs)


class FavoritesStore:
    """
    JSON file holding the user's favorites.

    Every mutating call writes the file before returning.
    """

    def __init__(self, path):
        self.path = Path(path)
        self._favorites: List[Favorite] = []
        self.load()

    @property
    def favorites(self) -> List[Favorite]:
        return sorted(self._favorites, key=lambda f: f.order)

    def __len__(self):
        return len(self._favorites)

    @property
    def is_full(self) -> bool:
        return len(self._favorites) >= MAX_FAVORITES

    def load(self):
        self._favorites = []
        if not self.path.exists():
            return

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, list):
                raise ValueError("expected a list of favorites")
            favorites = [Favorite.from_dict(item) for item in data]
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.error("Failed to load favorites from %s: %s", self.path, e)
            self._set_aside_corrupt()
            return

        self._favorites = favorites[:MAX_FAVORITES]
        self._renumber()
        logger.info("Loaded %d favorites from %s", len(self._favorites), self.path)

    def save(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump([fav.to_dict() for fav in self.favorites], f, indent=2)
        tmp_path.replace(self.path)

    def add_node(self, node: ExitNode) -> Optional[Favorite]:
        """Favorite a single node. Returns None when the store is full."""
        if self.is_full:
            logger.info("Not adding %s: %d favorites already", node.name, MAX_FAVORITES)
            return None
        favorite = Favorite.from_node(node, order=len(self._favorites))
        return self._insert(favorite)

    def add_group(self, group: LocationGroup) -> Optional[Favorite]:
        """Favorite a whole location group. Returns None when the store is full."""
        if self.is_full:
            logger.info("Not adding %s: %d favorites already", group.display_name, MAX_FAVORITES)
            return None
        if not group.nodes:
            return None
        favorite = Favorite.from_group(group, order=len(self._favorites))
        return self._insert(favorite)

    def delete(self, favorite: Favorite):
        """Remove a favorite and renumber the rest as 0..n-1."""
        self._favorites = [f for f in self._favorites if f.favorite_id != favorite.favorite_id]
        self._renumber()
        self.save()
        logger.info("Deleted favorite %s", favorite.name)

    def update(self, favorite: Favorite):
        """Persist in-place changes such as an advanced rotation cursor."""
        for i, existing in enumerate(self._favorites):
            if existing.favorite_id == favorite.favorite_id:
                self._favorites[i] = favorite
                break
        else:
            raise KeyError(f"Unknown favorite {favorite.favorite_id}")
        self.save()

    def clear(self):
        self._favorites = []
        self.save()
        logger.info("Cleared all favorites")

    def find_by_location_key(self, key: str) -> Optional[Favorite]:
        for favorite in self.favorites:
            if favorite.location_key == key:
                return favorite
        return None

    def find_by_node_id(self, node_id: str) -> Optional[Favorite]:
        """Single-node favorite for `node_id`, if any."""
        for favorite in self.favorites:
            if favorite.location_key is None and favorite.node_id == node_id:
                return favorite
        return None

    def backfill_hostnames(self, nodes: Iterable[ExitNode]) -> int:
        """Fill in DNS names missing from favorites saved by older versions."""
        by_id = {node.id: node for node in nodes}
        filled = 0
        for favorite in self._favorites:
            if favorite.hostname:
                continue
            node = by_id.get(favorite.node_id)
            if node is not None:
                favorite.hostname = node.dns_name
                filled += 1

        if filled:
            self.save()
            logger.info("Backfilled hostnames on %d favorites", filled)
        return filled

    def _insert(self, favorite: Favorite) -> Favorite:
        self._favorites.append(favorite)
        self.save()
        logger.info("Added favorite %s (%d nodes)", favorite.name, len(favorite.node_ids))
        return favorite

    def _renumber(self):
        for index, favorite in enumerate(self.favorites):
            favorite.order = index

    def _set_aside_corrupt(self):
        corrupt = self.path.with_suffix(self.path.suffix + ".corrupt")
        try:
            self.path.replace(corrupt)
            logger.warning("Moved unreadable favorites file to %s", corrupt)
        except OSError as e:
            logger.error("Could not move %s aside: %s", self.path, e)
