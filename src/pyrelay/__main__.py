import sys

from pyrelay._cli import main

sys.exit(main())
