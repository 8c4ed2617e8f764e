"""Multi-venue swap router."""

from swaprouter.routing.router import Router, get_default_router

__version__ = "0.1.0"
__all__ = ["Router", "get_default_router", "__version__"]
