"""
Display content definitions.

A piece of content is something shown on screen for ``duration`` seconds.
``weight`` controls how much it shows up compared to everything else.
"""

from dataclasses import dataclass
from enum import Enum


class ContentType(str, Enum):
    """How the presenter renders a piece of content."""

    IMAGE = "image"  # Still picture
    VIDEO = "video"  # Muted, autoplaying video
    IFRAME = "iframe"  # Another web page, needs cooperation from the other side


@dataclass(frozen=True)
class Content:
    """A single schedulable display item."""

    type: ContentType
    url: str
    duration: float
    weight: float = 1.0

