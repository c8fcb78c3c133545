import sys

from winsetup.cli import main

sys.exit(main())
