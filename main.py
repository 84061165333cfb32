#!/usr/bin/env python3
# main.py
"""
tedit launcher for running from a source checkout.

Puts ``src/`` on the import path and hands over to ``tedit.main.start``.
"""

import os
import sys

project_root = os.path.dirname(os.path.abspath(__file__))
src_dir = os.path.join(project_root, "src")
if src_dir not in sys.path:
    sys.path.insert(0, src_dir)

from tedit.main import start  # noqa: E402


if __name__ == "__main__":
    start()
