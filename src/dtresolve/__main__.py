import sys

from dtresolve.cli import main

sys.exit(main())
