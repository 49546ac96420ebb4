"""Allow ``python -m docsearch.cli`` execution."""

import sys

from docsearch.cli.bootstrap import main

sys.exit(main())
