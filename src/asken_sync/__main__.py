"""Allow ``python -m asken_sync DATE``."""

from asken_sync.cli import main

raise SystemExit(main())
