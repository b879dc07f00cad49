from .config import (
    cast_bool,
    cast_logging_level,
    cast_path,
)
from .context import (
    ip_address_context,
)



__all__ = [
    "cast_bool",
    "cast_logging_level",
    "cast_path",
    "ip_address_context",
]
