# netfx_check/paths.py
from __future__ import annotations
import sys
from pathlib import Path

# Where the package code lives (…/netfx_check)
PKG_ROOT: Path = Path(__file__).resolve().parent

# Where marker files are looked up at runtime:
# - Frozen: folder containing the .exe
# - Dev: the package folder itself
if getattr(sys, "frozen", False):
    APP_ROOT: Path = Path(sys.executable).resolve().parent
else:
    APP_ROOT: Path = PKG_ROOT

# ---- Registry locations (HKLM, 32-bit view) ----
NDP_KEY: str     = r"SOFTWARE\Microsoft\NET Framework Setup\NDP"
V4_FULL_KEY: str = NDP_KEY + r"\v4\Full"

# subkey of NDP that holds the 4.5+ line; reported by the release lookup instead
MODERN_KEY_NAME: str = "v4"
LEGACY_PREFIX: str   = "v"

__all__ = [
    "PKG_ROOT", "APP_ROOT",
    "NDP_KEY", "V4_FULL_KEY",
    "MODERN_KEY_NAME", "LEGACY_PREFIX",
]
