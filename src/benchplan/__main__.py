import sys

from benchplan.cli import main

sys.exit(main())
