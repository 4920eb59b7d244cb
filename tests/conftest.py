"""Make the in-tree ``lazypicker`` package importable without installing it.

Tests under ``tests/unit`` and ``tests/integration`` import ``lazypicker``
directly, so the checkout root goes first on ``sys.path``.
"""

from __future__ import annotations

import sys
from pathlib import Path

CHECKOUT_ROOT = str(Path(__file__).resolve().parents[1])

if CHECKOUT_ROOT not in sys.path:
    sys.path.insert(0, CHECKOUT_ROOT)
