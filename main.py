#!/usr/bin/env python3
"""
N-Gram Graph Engine - Main Entry Point

Builds character n-gram graphs of texts and compares texts by the
similarity of their graphs.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from ngramgraph.cli import main

if __name__ == "__main__":
    main()
