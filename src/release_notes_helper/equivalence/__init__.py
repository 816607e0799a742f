"""
Content equivalence between references and the bounded base walk.
"""

from .base_walk import (  # noqa: F401
    MAX_BASE_ATTEMPTS,
    Exhausted,
    Found,
    first_parent_finder,
    walk_to_distinct_base,
)
from .detector import EquivalenceDetector  # noqa: F401
