"""
ExitNoder - switch your Tailscale exit node from the macOS menu bar.
"""

__version__ = "1.0.0"

APP_NAME = "ExitNoder"
BUNDLE_ID = "us.rtrk.exitnoder"
