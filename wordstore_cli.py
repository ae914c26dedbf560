#!/usr/bin/env python3
"""
Project-level CLI launcher.

Usage:
    python wordstore_cli.py <command> [options]
"""

from wordstore.cli.main import main


if __name__ == "__main__":
    raise SystemExit(main())
