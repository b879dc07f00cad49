from .filters import HostFilter, IPAddressFilter



__all__ = [
    "HostFilter",
    "IPAddressFilter",
]
