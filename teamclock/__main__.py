import sys

from teamclock.cli import main

sys.exit(main())
