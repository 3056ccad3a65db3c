"""Allow running as python -m mapgen."""

import sys

from .cli import main

sys.exit(main())
