"""Directory-backed authentication gateway.

Authenticates a username and password against an LDAP directory and issues a
short-lived signed token asserting the authenticated identity.
"""
from .__version__ import __version__



__all__ = ["__version__"]
