import sys

from orchestra2md.cli import main

sys.exit(main())
