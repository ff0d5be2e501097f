"""Allow ``python -m nexus_flow``."""

from __future__ import annotations

from nexus_flow.main import main

if __name__ == "__main__":
    raise SystemExit(main())
