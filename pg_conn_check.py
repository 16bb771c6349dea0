import sys

from apps.cli.probe import main

if __name__ == "__main__":
    sys.exit(main())
