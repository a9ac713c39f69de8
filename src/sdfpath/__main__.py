import sys

from sdfpath.cli import main

sys.exit(main())
