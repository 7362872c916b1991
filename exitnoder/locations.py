"""Grouping of exit nodes by city and country."""

from dataclasses import dataclass, field
from typing import Iterable, List

from .models import ExitNode, Location


@dataclass
class LocationGroup:
    """Exit nodes sharing a city and country, offered as one favorite."""
    country_code: str
    city_code: str
    display_name: str
    location: Location
    nodes: List[ExitNode] = field(default_factory=list)

    @property
    def key(self) -> str:
        return f"{self.country_code}-{self.city_code}"

    @property
    def has_multiple_nodes(self) -> bool:
        return len(self.nodes) > 1

    @property
    def node_ids(self) -> List[str]:
        return [node.id for node in self.nodes]


def group_by_location(nodes: Iterable[ExitNode]) -> List[LocationGroup]:
    """
    Group location-tagged exit nodes by `CountryCode-CityCode`.

    The first node seen for a key names the group and supplies its location.
    Nodes missing either code are left out (see `tailnet_nodes`). Groups are
    sorted by display name, then key.
    """
    groups = {}

    for node in nodes:
        key = node.location_key
        if key is None:
            continue

        group = groups.get(key)
        if group is None:
            location = node.location
            group = LocationGroup(
                country_code=location.country_code,
                city_code=location.city_code,
                display_name=location.display_string or key,
                location=location,
            )
            groups[key] = group
        group.nodes.append(node)

    return sorted(groups.values(), key=lambda g: (g.display_name, g.key))


def tailnet_nodes(nodes: Iterable[ExitNode]) -> List[ExitNode]:
    """Exit nodes without a city/country, usually the user's own machines."""
    return [node for node in nodes if node.location_key is None]
