"""
Timecamp Rofi — Entry Point.

Single entry point: `python main.py <command>` runs one CLI subcommand.
"""

from timecamp_rofi.cli import main

if __name__ == "__main__":
    main()
