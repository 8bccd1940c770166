import sys

from flowgraph.cli import main

sys.exit(main())
