"""Records parsed from `tailscale status --json`."""

import logging
from dataclasses import dataclass, field
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Location:
    """Geographic tag Tailscale attaches to location-aware exit nodes."""
    country: Optional[str] = None
    country_code: Optional[str] = None
    city: Optional[str] = None
    city_code: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    priority: Optional[int] = None

    @property
    def display_string(self) -> Optional[str]:
        if self.city and self.country:
            return f"{self.city}, {self.country}"
        if self.country:
            return self.country
        return None

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @classmethod
    def from_json(cls, data: dict) -> "Location":
        return cls(
            country=data.get("Country") or None,
            country_code=data.get("CountryCode") or None,
            city=data.get("City") or None,
            city_code=data.get("CityCode") or None,
            latitude=data.get("Latitude"),
            longitude=data.get("Longitude"),
            priority=data.get("Priority"),
        )


@dataclass(frozen=True)
class ExitNode:
    """A peer that may be used as an exit node."""
    id: str
    name: str  # short hostname
    dns_name: str  # full DNS name, what the CLI accepts
    location: Optional[Location] = None

    @property
    def display_name(self) -> str:
        location_string = self.location.display_string if self.location else None
        if location_string:
            return f"{self.name} ({location_string})"
        return self.name

    @property
    def location_key(self) -> Optional[str]:
        if self.location is None:
            return None
        if not self.location.city_code or not self.location.country_code:
            return None
        return f"{self.location.country_code}-{self.location.city_code}"

    @property
    def cli_name(self) -> str:
        return self.dns_name.rstrip(".") or self.id


@dataclass
class TailscaleStatus:
    version: Optional[str] = None
    backend_state: Optional[str] = None
    exit_nodes: list = field(default_factory=list)
    exit_node_id: Optional[str] = None

    @classmethod
    def from_json(cls, data: dict) -> "TailscaleStatus":
        """
        Build a status from the decoded JSON document.

        Only peers offering themselves as exit nodes, with ID, HostName and
        DNSName all present, are kept. Exit nodes come back sorted by name.
        """
        peers = data.get("Peer") or {}
        nodes = []
        current = None

        for key, peer in peers.items():
            if not isinstance(peer, dict):
                logger.debug("Skipping malformed peer entry %s", key)
                continue
            if peer.get("ExitNode") and current is None:
                current = peer.get("ID")
            if not peer.get("ExitNodeOption"):
                continue

            node_id = peer.get("ID")
            host_name = peer.get("HostName")
            dns_name = peer.get("DNSName")
            if not node_id or not host_name or not dns_name:
                continue

            location = peer.get("Location")
            nodes.append(ExitNode(
                id=node_id,
                name=host_name,
                dns_name=dns_name,
                location=Location.from_json(location) if isinstance(location, dict) else None,
            ))

        exit_node_status = data.get("ExitNodeStatus")
        if isinstance(exit_node_status, dict) and exit_node_status.get("ID"):
            current = exit_node_status["ID"]

        return cls(
            version=data.get("Version"),
            backend_state=data.get("BackendState"),
            exit_nodes=sorted(nodes, key=lambda n: (n.name, n.id)),
            exit_node_id=current,
        )
