"""Allow ``python -m structurizr_client``."""

import sys

from .main import main

if __name__ == "__main__":
    sys.exit(main())
