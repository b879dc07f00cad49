import logging
import socket

from dcauth.util import ip_address_context



HOST = socket.gethostname()


class HostFilter(logging.Filter):
    """Logging filter that adds the host to each log record."""
    def filter(self, record: logging.LogRecord) -> bool:
        record.host = HOST
        return True


class IPAddressFilter(logging.Filter):
    """Logging filter that adds the client IP Address to each log record.
    
    The `IPAddressMiddleware` must be installed for this filter. Records
    outside of a request get "-".
    """
    def filter(self, record: logging.LogRecord) -> bool:
        record.ip_address = ip_address_context.get() or "-"
        return True
