#!/usr/bin/env python3
"""
Datawise - Entry Point

Usage:
    python run.py              # Interactive mode
    python run.py config       # Show configuration status
    python run.py version      # Show version
    python run.py --help       # All commands
"""

import sys

from datawise.cli import main

if __name__ == '__main__':
    sys.exit(main())
