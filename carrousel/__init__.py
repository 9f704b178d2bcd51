"""
Carrousel - Weighted content rotation for unattended displays

Rotates images, videos and embedded web pages on a screen:
- Weighted random selection that favours items waiting the longest
- No immediate repeats, no starvation
- Immutable playlist snapshots with injectable clock and randomness
- Headless display driver with preloading and periodic catalog refresh
"""

__version__ = "1.0.0"
__author__ = "Carrousel Contributors"
__license__ = "MIT"

from carrousel.config import get_config, load_config

__all__ = [
    "__version__",
    "get_config",
    "load_config",
]
