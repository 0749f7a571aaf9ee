"""Publishing package"""

from .models import PostResult
from .x_poster import Poster

__all__ = [
    "Poster",
    "PostResult",
]
