import sys

from taskrecords.cli import main

sys.exit(main())
