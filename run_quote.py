#!/usr/bin/env python3
"""
Quote a shipment or check provider status from the command line.

See shipquote/cli.py for options.
"""
import sys

from shipquote.cli import main

if __name__ == "__main__":
    sys.exit(main())
