"""Pytest configuration.

Ensures that the repository root is importable so that ``src`` and its
subpackages resolve when tests are executed without installing the project.
"""

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
