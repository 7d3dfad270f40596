#!/usr/bin/env python3
"""Run import sorting, formatting and tests for ListingRec.

Usage:
    python scripts/lint_all.py [--check] [--skip-tests]

Options:
    --check: Only check formatting (don't modify files)
    --skip-tests: Skip running pytest
"""

import argparse
import subprocess
import sys
from pathlib import Path

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent

SOURCE_DIRS = ["listingrec", "tests", "scripts"]


def run_command(cmd: list[str], description: str) -> bool:
    """Run a command from the project root and report whether it passed."""
    print(f"\n{'='*60}")
    print(f"Running: {description}")
    print(f"Command: {' '.join(cmd)}")
    print(f"{'='*60}\n")

    try:
        result = subprocess.run(cmd, cwd=PROJECT_ROOT, check=False)
    except FileNotFoundError as e:
        print(f"\n✗ Error: {e}")
        print(f"  Make sure the command is installed and in your PATH\n")
        return False

    if result.returncode == 0:
        print(f"\n✓ {description} passed\n")
        return True
    print(f"\n✗ {description} failed (exit code: {result.returncode})\n")
    return False


def main() -> int:
    """Main entry point for linting script.

    Returns:
        Exit code: 0 if all checks passed, 1 otherwise
    """
    parser = argparse.ArgumentParser(
        description="Run linting, formatting, and testing checks",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only check formatting (don't modify files)",
    )
    parser.add_argument(
        "--skip-tests",
        action="store_true",
        help="Skip running pytest",
    )
    args = parser.parse_args()

    print("\n" + "="*60)
    print("ListingRec Code Quality Checks")
    print("="*60)

    checks = [
        (["isort", *SOURCE_DIRS] + (["--check-only", "--diff"] if args.check else []),
         "isort (import sorting)"),
        (["black", *SOURCE_DIRS] + (["--check"] if args.check else []),
         "black (code formatting)"),
    ]
    if not args.skip_tests:
        checks.append((["pytest", "tests/", "-v"], "pytest (tests)"))

    results = [run_command(cmd, description) for cmd, description in checks]

    print("\n" + "="*60)
    if all(results):
        print("✓ All checks passed!")
        print("="*60 + "\n")
        return 0

    print("✗ Some checks failed. Please fix the issues above.")
    print("="*60 + "\n")
    return 1


if __name__ == "__main__":
    sys.exit(main())
