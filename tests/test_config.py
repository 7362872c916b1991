"""
Configuration loading.
"""

import json

from exitnoder import config as config_module
from exitnoder.config import DEFAULT_REFRESH_INTERVAL, Config


def test_defaults_without_file(tmp_path, monkeypatch):
    monkeypatch.setattr(config_module, "default_tailscale_exe", lambda: "tailscale")

    config = Config([tmp_path / "missing.json"])

    assert config.config_path is None
    assert config.valid
    assert config.tailscale_exe == "tailscale"
    assert config.refresh_interval == DEFAULT_REFRESH_INTERVAL
    assert config.notifications is True
    assert config.favorites_file.name == "favorites.json"


def test_first_existing_path_wins(tmp_path):
    first = tmp_path / "first.json"
    second = tmp_path / "second.json"
    second.write_text(json.dumps({"tailscale_exe": "/opt/second"}))

    assert Config([first, second]).tailscale_exe == "/opt/second"

    first.write_text(json.dumps({"tailscale_exe": "/opt/first"}))
    assert Config([first, second]).tailscale_exe == "/opt/first"


def test_values_from_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "tailscale_exe": "/usr/local/bin/tailscale",
        "favorites_file": str(tmp_path / "favs.json"),
        "refresh_interval": 10,
        "log_level": "DEBUG",
        "notifications": False,
        "unknown": "ignored",
    }))

    config = Config([path])

    assert config.config_path == path
    assert config.tailscale_exe == "/usr/local/bin/tailscale"
    assert config.favorites_file == tmp_path / "favs.json"
    assert config.refresh_interval == 10
    assert config.log_level == "DEBUG"
    assert config.notifications is False


def test_unparseable_file_falls_back(tmp_path, monkeypatch):
    monkeypatch.setattr(config_module, "default_tailscale_exe", lambda: "tailscale")
    path = tmp_path / "config.json"
    path.write_text("{oops")

    config = Config([path])

    assert not config.valid
    assert config.tailscale_exe == "tailscale"


def test_bad_refresh_interval(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"refresh_interval": "soon"}))
    assert Config([path]).refresh_interval == DEFAULT_REFRESH_INTERVAL

    path.write_text(json.dumps({"refresh_interval": -5}))
    assert Config([path]).refresh_interval == DEFAULT_REFRESH_INTERVAL
