import sys

from dotgrid.cli import main

sys.exit(main())
