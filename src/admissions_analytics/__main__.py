"""
Package entry point for python -m execution.

USAGE:
    python -m admissions_analytics            # Serve dashboard
    python -m admissions_analytics serve      # Serve dashboard
    python -m admissions_analytics report     # Print report
    python -m admissions_analytics snapshot   # Print snapshot JSON
"""

import sys

from admissions_analytics.cli import main

if __name__ == "__main__":
    sys.exit(main())
