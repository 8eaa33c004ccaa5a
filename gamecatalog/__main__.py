from __future__ import annotations

import sys

from gamecatalog.cli import main

sys.exit(main())
