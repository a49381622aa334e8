#!/usr/bin/env python3
"""
screenfit CLI - fit lines to points picked on a screenshot.

Usage:
    screenfit                        - Capture the screen and launch the GUI (default)
    screenfit gui [--config PATH] [--image PATH]
                                     - Launch the GUI
    screenfit init-config [PATH]     - Write a default config file
    screenfit --help                 - Show this help
"""

import argparse
import sys
from pathlib import Path


def _gui(argv: list[str]) -> int:
    parser = argparse.ArgumentParser(prog="screenfit gui")
    parser.add_argument("--config", type=Path, default=None, help="Config TOML file")
    parser.add_argument(
        "--image", type=Path, default=None, help="Measure on an image file instead of the screen"
    )
    args = parser.parse_args(argv)

    from screenfit.gui.main import main as gui_main
    return gui_main(config_path=args.config, image_path=args.image)


def _init_config(argv: list[str]) -> int:
    from screenfit.config import (
        create_default_app_config,
        get_default_config_path,
        save_app_config,
    )

    path = Path(argv[0]) if argv else get_default_config_path()
    if path.exists():
        print(f"Config already exists: {path}")
        return 1
    save_app_config(create_default_app_config(), path)
    print(f"Wrote {path}")
    return 0


def main():
    if len(sys.argv) < 2:
        # Default to the GUI
        return _gui([])

    if sys.argv[1] in ("-h", "--help"):
        print(__doc__)
        print("Keys in the GUI:")
        print("  right-click  add a point")
        print("  L            fit a line through the buffered points")
        print("  S            export all lines as CSV")
        print("  Escape       quit")
        print()
        return 0

    command = sys.argv[1]
    rest = sys.argv[2:]

    if command == "gui":
        return _gui(rest)

    elif command == "init-config":
        return _init_config(rest)

    elif command.startswith("-"):
        # Options without a subcommand go to the GUI
        return _gui(sys.argv[1:])

    else:
        print(f"Unknown command: {command}")
        print("Run 'screenfit --help' for usage")
        return 1


if __name__ == "__main__":
    sys.exit(main())
