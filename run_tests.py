#!/usr/bin/env python3
"""
Test runner for nsdebug.

Usage:
    python run_tests.py             # Run fast unit tests only (default)
    python run_tests.py --all       # Include the slow concurrency tests
    python run_tests.py --coverage  # Run with coverage report
"""

import argparse
import subprocess
import sys


def main():
    parser = argparse.ArgumentParser(description="Test runner for nsdebug")
    parser.add_argument("--all", action="store_true",
                        help="Run all tests including slow ones")
    parser.add_argument("--coverage", action="store_true",
                        help="Run tests with coverage analysis")
    parser.add_argument("-q", "--quiet", action="store_true",
                        help="Less verbose output")
    args = parser.parse_args()

    cmd = [sys.executable, "-m", "pytest", "tests/", "--tb=short"]
    if not args.quiet:
        cmd.append("-v")
    if not args.all:
        cmd.extend(["-m", "not slow"])
    if args.coverage:
        cmd.extend(["--cov=nsdebug", "--cov-report=term-missing"])

    print(f"Running: {' '.join(cmd)}")
    return subprocess.run(cmd).returncode


if __name__ == "__main__":
    sys.exit(main())
