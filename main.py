#!/usr/bin/env python3
"""Run the cache simulator from a source checkout.

    gunzip -c traces/art.trace.gz | python main.py -a 2 -s 32
"""
import sys

from tracesim.cli import main

if __name__ == '__main__':
    sys.exit(main())
