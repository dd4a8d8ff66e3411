"""Entry point for ``python -m runsible``."""

import sys

from runsible.cli import main

if __name__ == "__main__":
    sys.exit(main())
