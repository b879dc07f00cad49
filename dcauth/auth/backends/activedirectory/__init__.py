from .client import ActiveDirectoryClient, ActiveDirectoryConnection



__all__ = [
    "ActiveDirectoryClient",
    "ActiveDirectoryConnection",
]
