import sys

from src.catalog.cli import main

sys.exit(main())
