"""Pytest configuration shared by every test directory."""

import os
import sys
from pathlib import Path

# Make the top-level modules importable when pytest is run from a subdirectory
ROOT_DIR = Path(__file__).parent.resolve()
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

# Tests assume the built-in defaults, not whatever the developer's shell exports
for _name in list(os.environ):
    if _name.startswith("CLIP_"):
        del os.environ[_name]
