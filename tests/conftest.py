import pytest

from exitnoder.favorites import FavoritesStore
from exitnoder.models import ExitNode, Location


@pytest.fixture
def make_node():
    """Factory for exit nodes, location-tagged when codes are given."""
    def _make(node_id, name=None, country_code=None, city_code=None,
              city=None, country=None, latitude=None, longitude=None):
        location = None
        if any(v is not None for v in (country_code, city_code, city, country)):
            location = Location(
                country=country,
                country_code=country_code,
                city=city,
                city_code=city_code,
                latitude=latitude,
                longitude=longitude,
            )
        name = name or node_id.lower()
        return ExitNode(id=node_id, name=name, dns_name=f"{name}.example.ts.net.", location=location)
    return _make


@pytest.fixture
def store(tmp_path):
    return FavoritesStore(tmp_path / "favorites.json")


@pytest.fixture
def status_json():
    """Trimmed `tailscale status --json` output."""
    return {
        "Version": "1.76.1",
        "BackendState": "Running",
        "Self": {"ID": "nSelf", "HostName": "laptop", "DNSName": "laptop.example.ts.net."},
        "Peer": {
            "nodekey:1": {
                "ID": "n1", "HostName": "us-nyc-wg-301", "DNSName": "us-nyc-wg-301.mullvad.ts.net.",
                "ExitNode": False, "ExitNodeOption": True,
                "Location": {"Country": "USA", "CountryCode": "US", "City": "New York, NY",
                             "CityCode": "NYC", "Latitude": 40.7, "Longitude": -74.0, "Priority": 100},
            },
            "nodekey:2": {
                "ID": "n2", "HostName": "se-sto-wg-001", "DNSName": "se-sto-wg-001.mullvad.ts.net.",
                "ExitNode": True, "ExitNodeOption": True,
                "Location": {"Country": "Sweden", "CountryCode": "SE", "City": "Stockholm",
                             "CityCode": "STO", "Latitude": 59.3, "Longitude": 18.0},
            },
            "nodekey:3": {
                "ID": "n3", "HostName": "homeserver", "DNSName": "homeserver.example.ts.net.",
                "ExitNode": False, "ExitNodeOption": True,
            },
            "nodekey:4": {
                "ID": "n4", "HostName": "phone", "DNSName": "phone.example.ts.net.",
                "ExitNode": False, "ExitNodeOption": False,
            },
            "nodekey:5": {
                "ID": "n5", "HostName": "half-configured",
                "ExitNodeOption": True,
            },
        },
        "ExitNodeStatus": {"ID": "n2", "Online": True, "TailscaleIPs": ["100.64.0.2/32"]},
    }
