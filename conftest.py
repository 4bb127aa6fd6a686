"""
Root conftest.py for layered-config.

Puts the project root on sys.path so the tests run from a plain checkout
without installing the package.
"""

import os
import sys

# Add project root to path - this must happen before any imports
project_root = os.path.dirname(os.path.abspath(__file__))
if project_root not in sys.path:
    sys.path.insert(0, project_root)
