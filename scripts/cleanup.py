#!/usr/bin/env python3
"""
CLI entry point for manual cleanup of conversion artifacts.

Usage:
    python -m scripts.cleanup              # run cleanup
    python -m scripts.cleanup --dry-run    # preview what would be cleaned
    python -m scripts.cleanup --max-age-hours 1
"""

import argparse
import sys
from pathlib import Path

# Ensure project root is on path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))


def main():
    parser = argparse.ArgumentParser(description="Content Export Server - Temp File Cleanup")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Preview what would be cleaned without deleting",
    )
    parser.add_argument(
        "--max-age-hours",
        type=int,
        default=None,
        help="Remove artifacts older than this (default: CLEANUP_TEMP_MAX_AGE_HOURS)",
    )
    args = parser.parse_args()

    from core.services.file_cleanup import FileCleanupService

    svc = FileCleanupService(temp_max_age_hours=args.max_age_hours)
    result = svc.run_cleanup(dry_run=args.dry_run)

    print(result)

    if result.errors:
        print(f"\nWarnings ({len(result.errors)}):")
        for err in result.errors:
            print(f"  - {err}")


if __name__ == "__main__":
    main()
