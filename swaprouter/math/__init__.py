"""Mathematical utilities for the swap router.

This package provides fixed-point primitives for rate-graph costs:
- log2_q128: base-2 logarithm in signed Q128.128
"""

from swaprouter.math.log2 import Log2DomainError, log2_q128, to_q128

__all__ = ["Log2DomainError", "log2_q128", "to_q128"]
