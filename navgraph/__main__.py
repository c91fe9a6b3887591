import sys

from navgraph.cli import main

sys.exit(main())
