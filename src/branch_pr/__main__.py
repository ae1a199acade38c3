"""Allow ``python -m branch_pr``."""

import sys

from branch_pr.cli import main

sys.exit(main())
