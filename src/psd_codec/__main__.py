import sys

from psd_codec.cli import main

if __name__ == "__main__":
    sys.exit(main())
