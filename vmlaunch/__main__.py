import sys

from vmlaunch import cli

if __name__ == "__main__":
    sys.exit(cli.main())
