# SPDX-License-Identifier: MIT
import sys

from ghlens.cli import main

if __name__ == "__main__":
    sys.exit(main())
