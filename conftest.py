"""Root conftest.py for pytest.

Puts the project root on sys.path so `bird`, `api` and `config`
import without installing the package.
"""
import os
import sys

project_root = os.path.dirname(os.path.abspath(__file__))
if project_root not in sys.path:
    sys.path.insert(0, project_root)
