from enum import Enum



__all__ = ["DirectoryBackends"]


class DirectoryBackends(str, Enum):
    """Available directory client implementations.
    
    Implementations are imported on selection so their client libraries are
    only required when used.
    """
    DEFAULT = "default"
    ACTIVE_DIRECTORY = "activedirectory"
