import sys

from dh_exchange.cli import main

sys.exit(main())
