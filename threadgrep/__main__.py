import sys

from threadgrep.cli.search import main

sys.exit(main())
