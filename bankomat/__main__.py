"""Allow ``python -m bankomat``."""

from bankomat.cli.main import main

raise SystemExit(main())
