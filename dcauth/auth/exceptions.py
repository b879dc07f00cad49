from dcauth.exceptions import DCAuthException



class DirectoryError(DCAuthException):
    """Raised by a directory client when the directory refuses a bind.
    
    Args:
        message: The diagnostic message from the directory.
        code: The LDAP result code, if known.
    """
    def __init__(self, message: str, code: int | None = None) -> None:
        self.message = message
        self.code = code

    def __str__(self) -> str:
        if self.code is None or f"[{self.code}]" in self.message:
            return self.message
        return "{} (result code {})".format(self.message, self.code)


class DirectoryUnavailable(DirectoryError):
    """Raised by a directory client when the directory could not be reached,
    the transport failed or the operation timed out.
    """


class MechanismUnavailable(DirectoryError):
    """Raised by a directory client when the transport or mechanism of an
    attempt could not be used at all, for example a refused StartTLS upgrade
    or a SASL mechanism the local client cannot initialize. The credentials
    were never evaluated so the next rung of the ladder is tried.
    """
