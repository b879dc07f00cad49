from .auth import router as auth_



__all__ = [
    "auth_",
]
