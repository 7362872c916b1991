"""
py2app setup script for the macOS ExitNoder app.
Usage: python setup_macos.py py2app
"""

from setuptools import setup
import sys

# Ensure we're on macOS
if sys.platform != 'darwin':
    print("This setup script is for macOS only.")
    print("For development, use: pip install -e .")
    sys.exit(1)

APP = ['main_macos.py']
DATA_FILES = []

OPTIONS = {
    'argv_emulation': False,
    'plist': {
        'CFBundleName': 'ExitNoder',
        'CFBundleDisplayName': 'ExitNoder',
        'CFBundleIdentifier': 'us.rtrk.exitnoder',
        'CFBundleVersion': '1.0.0',
        'CFBundleShortVersionString': '1.0.0',
        'LSUIElement': True,  # Hide from Dock (menu bar app only)
        'NSHighResolutionCapable': True,
        'LSMinimumSystemVersion': '10.14.0',
        'NSHumanReadableCopyright': 'MIT License',
    },
    'packages': ['rumps', 'PIL', 'exitnoder'],
    'includes': ['json', 'subprocess', 'pathlib'],
}

setup(
    name='ExitNoder',
    app=APP,
    data_files=DATA_FILES,
    options={'py2app': OPTIONS},
    setup_requires=['py2app'],
)
