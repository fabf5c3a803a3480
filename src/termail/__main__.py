# =============================================================================
# termail Entry Point for `python -m termail`
# =============================================================================
# This module allows termail to be run as a Python module:
#
#   python -m termail ~/mail
#
# This is equivalent to running the 'termail' command after installation.
# =============================================================================

import sys

from termail.app import main

if __name__ == "__main__":
    sys.exit(main())
