from contextvars import ContextVar
from typing import Optional



ip_address_context: ContextVar[Optional[str]] = ContextVar("ip_address_context", default=None)
