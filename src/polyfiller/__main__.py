"""`python -m polyfiller` の入口。"""

from __future__ import annotations

import sys

from polyfiller.cli import main

if __name__ == "__main__":
    sys.exit(main())
