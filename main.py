"""Run Flappy Dopamine from a source checkout: ``python main.py``."""

import sys

from flappy_dopamine.app import main

if __name__ == "__main__":
    sys.exit(main())
