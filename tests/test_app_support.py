"""
Icons, launch agent and logging helpers used by the menu-bar app.
"""

import logging

from PIL import Image

from exitnoder import BUNDLE_ID, startup
from exitnoder.icons import ICON_SIZE, generate_icons
from exitnoder.logs import parse_level, setup_logging
from exitnoder.startup import StartupManager


def test_generate_icons(tmp_path):
    on_path, off_path = generate_icons(tmp_path / "icons")

    with Image.open(on_path) as on, Image.open(off_path) as off:
        assert on.size == (ICON_SIZE, ICON_SIZE)
        assert off.size == (ICON_SIZE, ICON_SIZE)
        center = (ICON_SIZE // 2, ICON_SIZE // 2)
        assert on.getpixel(center)[3] == 255
        assert off.getpixel(center)[3] == 0


def test_launch_agent_enable_disable(tmp_path, monkeypatch):
    commands = []
    monkeypatch.setattr(StartupManager, "LAUNCHAGENTS_DIR", tmp_path)
    monkeypatch.setattr(startup.subprocess, "run", lambda cmd, **kw: commands.append(cmd))

    assert not StartupManager.is_enabled()
    assert StartupManager.enable()

    plist = tmp_path / f"{BUNDLE_ID}.plist"
    assert StartupManager.is_enabled()
    text = plist.read_text()
    assert f"<string>{BUNDLE_ID}</string>" in text
    assert "main_macos.py" in text
    assert commands[-1] == ["launchctl", "load", str(plist)]

    assert StartupManager.disable()
    assert not plist.exists()
    assert commands[-1] == ["launchctl", "unload", str(plist)]


def test_parse_level():
    assert parse_level("debug") == logging.DEBUG
    assert parse_level(logging.WARNING) == logging.WARNING
    assert parse_level("nonsense") == logging.INFO


def test_setup_logging_writes_file(tmp_path):
    log_file = tmp_path / "logs" / "app.log"
    root = logging.getLogger()
    saved = list(root.handlers), root.level
    try:
        setup_logging(log_file, name="Test")
        logging.getLogger("exitnoder.test").info("hello")
        for handler in root.handlers:
            handler.flush()
        assert "[Test] hello" in log_file.read_text()
    finally:
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
        for handler in saved[0]:
            root.addHandler(handler)
        root.setLevel(saved[1])
