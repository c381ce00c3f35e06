"""
Run a price scrape from a source checkout without installing the package.
"""

from __future__ import annotations

from prisbanditt.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
