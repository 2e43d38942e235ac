#!/usr/bin/env python3
"""Run the tablefetch test suites.

Usage:
    python tests/test_runner.py              # everything
    python tests/test_runner.py unit         # unit tests only
    python tests/test_runner.py integration  # provider / pipeline tests
    python tests/test_runner.py e2e          # CLI tests
"""
import subprocess
import sys

SUITES = {
    "unit": ["-m", "unit", "tests/unit/"],
    "integration": ["-m", "integration", "tests/integration/"],
    "e2e": ["-m", "e2e", "tests/e2e/"],
    "all": ["tests/"],
}


def run_tests(test_type="all"):
    if test_type not in SUITES:
        print(f"Unknown test type: {test_type} (choose from {', '.join(SUITES)})")
        sys.exit(1)

    cmd = [sys.executable, "-m", "pytest", *SUITES[test_type]]

    # Add coverage if pytest-cov is installed
    has_cov = subprocess.run([sys.executable, "-c", "import pytest_cov"], capture_output=True)
    if has_cov.returncode == 0:
        cmd.extend(["--cov=tablefetch", "--cov-report=term"])

    print(f"Running {test_type} tests...")
    sys.exit(subprocess.run(cmd).returncode)


if __name__ == "__main__":
    run_tests(sys.argv[1] if len(sys.argv) > 1 else "all")
