import sys

from mnemonic_pegs.app.cli import main

sys.exit(main())
