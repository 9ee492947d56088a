#!/usr/bin/env python3
"""
Check that every setting an export run needs is present.

Reads the environment (and .env) the same way a run does, reports missing
or blank values and exits non-zero if any are found. Performs no I/O
against MongoDB or Blob Storage.
"""

import sys
import os

sys.path.append(os.getcwd())

from core.config import REQUIRED_SETTINGS, get_settings


def main():
    """Report missing required settings"""
    print("🔍 Checking export configuration...")

    settings = get_settings()
    missing = settings.missing_required()

    for name in REQUIRED_SETTINGS:
        marker = "❌" if name in missing else "✓"
        print(f"  {marker} {name}")

    if missing:
        print("\n" + "="*70)
        print("❌ MISSING REQUIRED SETTINGS - export runs will abort")
        print("="*70)
        print("\nSet these environment variables (or add them to .env):")
        for name in missing:
            print(f"  - {name}")
        print()
        return 1

    print("✓ All required settings present")
    return 0


if __name__ == '__main__':
    sys.exit(main())
