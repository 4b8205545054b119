"""Run the Seabird CLI as ``python -m cli parse SOURCE``."""

from __future__ import annotations

from cli.main import main


if __name__ == "__main__":
    raise SystemExit(main())
