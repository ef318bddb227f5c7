"""gridkiosk - multi-display grid content player for kiosk and signage deployments."""

__version__ = "1.0.0"
__author__ = "gridkiosk Team"
__description__ = "Grid content player with multi-display topology detection and kiosk fullscreen"

__all__ = [
    "__author__",
    "__description__",
    "__version__",
]
