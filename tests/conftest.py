"""
Pytest configuration for flatslider tests.

Automatically adds src/ to sys.path so tests can import flatslider without
installing the package, and forces a non-interactive matplotlib backend.
"""

import os
import sys

repo_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
src_path = os.path.join(repo_root, 'src')

if src_path not in sys.path:
    sys.path.insert(0, src_path)

os.environ.setdefault("MPLBACKEND", "Agg")


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: longer cyclic runs")
