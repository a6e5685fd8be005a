"""Version information for nsdebug (kept in step with setup.py)."""

import re

__version__ = "0.3.0b0"
__app_name__ = "nsdebug"

VERSION = __version__
# MAJOR.MINOR.PATCH without the pre-release tag
BASE_VERSION = re.match(r"\d+\.\d+\.\d+", __version__).group(0)
