"""
eqplus - per-device Equalizer APO filter configuration.

Reads, edits and writes the eqplus.txt companion file that Equalizer APO
includes from its config.txt.

Usage:
    # From installed package
    eqplus show
    python -m eqplus add --type peaking --freq 1000 --gain 2.5 --q 1.0
"""

__version__ = "0.1.0"
__license__ = "GPL-3.0"

__all__ = ["__version__"]
