"""Allow running the extractor with ``python -m i18n_extractor``."""

import sys

from .main import main

sys.exit(main())
