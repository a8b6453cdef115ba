"""Abstract base class for mail connectors."""

import socket
from abc import ABC, abstractmethod
from types import TracebackType


def set_socket_timeout(sock: socket.socket | None, seconds: float) -> None:
    """Apply a timeout to an open socket, if there is one."""
    if sock is not None:
        sock.settimeout(seconds)


class BaseConnector(ABC):
    """Interface shared by the submission and retrieval connectors.

    A connector wraps exactly one server connection. ``disconnect()`` must be
    safe to call after a failed ``connect()`` and must not raise.
    """

    @property
    @abstractmethod
    def host(self) -> str:
        """Host name of the server this connector talks to."""
        ...

    @abstractmethod
    def connect(self) -> None:
        """Open the encrypted connection and authenticate."""
        ...

    @abstractmethod
    def disconnect(self) -> None:
        """Close the connection to the server."""
        ...

    def __enter__(self) -> "BaseConnector":
        """Enter context manager, connecting to the server."""
        try:
            self.connect()
        except BaseException:
            self.disconnect()
            raise
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit context manager, disconnecting from the server."""
        self.disconnect()
