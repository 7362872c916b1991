"""
ExitNoder - macOS menu bar entry point.
Run directly, or build into an .app with: python setup_macos.py py2app
"""

from exitnoder.app import main


if __name__ == "__main__":
    main()
