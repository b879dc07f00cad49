from .auth import get_gateway



__all__ = [
    "get_gateway",
]
