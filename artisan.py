#!/usr/bin/env python3
"""
Artisan Console Application

Usage:
    python artisan.py <command> [options] [arguments]
    python artisan.py list
    python artisan.py help <command>

Examples:
    python artisan.py translatable:missing
    python artisan.py translatable:missing Product --locale=fr
"""

from __future__ import annotations

import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))


def main() -> int:
    """Main entry point for the Artisan console."""
    try:
        from app.Console.Artisan import kernel
        from bootstrap.application import create_app

        create_app()

        # Models are registered as their modules are imported
        import app.Models  # noqa: F401

        return kernel.handle()
    except KeyboardInterrupt:
        print("\nOperation cancelled.", file=sys.stderr)
        return 130
    except Exception as e:
        print(f"Artisan error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
