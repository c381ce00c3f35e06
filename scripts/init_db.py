"""
Create missing catalog tables on the configured database.
"""

from __future__ import annotations

from db.session import create_all_tables, get_engine


def main() -> int:
    create_all_tables()
    print(f"Catalog tables ready on {get_engine().url.render_as_string(hide_password=True)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
