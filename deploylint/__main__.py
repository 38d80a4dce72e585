import sys

from .cli.validate import main

sys.exit(main())
