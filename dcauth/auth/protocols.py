from typing import FrozenSet, Protocol

from dcauth.auth.models import BindAttempt, Mechanism



class DirectoryConnection(Protocol):
    def bind(self, user: str, password: str, realm: str | None) -> None:
        """Connect to the directory and bind with the given credentials.

        This is a blocking call, it is always run in a worker thread.

        Raises:
            DirectoryUnavailable: The directory could not be reached, the
                transport could not be secured or the operation timed out.
            DirectoryError: The directory refused the bind.
        """
        ...

    def close(self) -> None:
        """Release the connection.
        
        Must be safe to call more than once, before `bind` has returned and
        from a thread other than the one running `bind`.
        """
        ...


class DirectoryClient(Protocol):
    @property
    def mechanisms(self) -> FrozenSet[Mechanism]:
        """The bind mechanisms this client is able to present."""
        ...

    def open(self, attempt: BindAttempt) -> DirectoryConnection:
        """Create an unbound connection for a ladder attempt. Performs no I/O."""
        ...


class ConfigurationSource(Protocol):
    def get(self, key: str) -> str | None:
        """Return the configured value for a colon-delimited key, `None` if unset."""
        ...
