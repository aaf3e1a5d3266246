"""Pytest configuration for the test suite.

Ensure the repository root is on sys.path so ``microftps`` and ``tests.base``
can be imported without installing the package first.
"""

import os
import sys

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)
