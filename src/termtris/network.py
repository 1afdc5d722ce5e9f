"""Two-peer link over a single non-blocking TCP stream."""

from __future__ import annotations

import logging
import socket

from .protocol import Message, ProtocolError, decode, encode
from .settings import NetRole

logger = logging.getLogger(__name__)


class NetworkSetupError(RuntimeError):
    """Raised when the peer connection cannot be established."""


class PeerDisconnected(ConnectionError):
    """Raised when the remote end closed the stream."""


class PeerLink:
    """Connected peer socket plus, on the server side, the listening socket."""

    def __init__(self, sock: socket.socket, role: NetRole, listener: socket.socket | None = None) -> None:
        self.sock = sock
        self.role = role
        self.listener = listener
        self.sock.setblocking(False)

    @classmethod
    def listen(cls, port: int, host: str = "") -> "PeerLink":
        """Wait for exactly one client on `port`."""
        listener = None
        try:
            listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
            listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            listener.bind((host, port))
            listener.listen(1)
            logger.info("waiting for a peer on port %d", port)
            conn, address = listener.accept()
        except OSError as exc:
            if listener is not None:
                listener.close()
            raise NetworkSetupError(f"cannot accept a peer on port {port}: {exc}") from exc
        logger.info("peer connected from %s:%d", *address[:2])
        return cls(conn, NetRole.SERVER, listener)

    @classmethod
    def connect(cls, host: str, port: int) -> "PeerLink":
        """Resolve host:port and connect to a listening peer."""
        try:
            sock = socket.create_connection((host, port))
        except OSError as exc:
            raise NetworkSetupError(f"cannot connect to {host}:{port}: {exc}") from exc
        logger.info("connected to %s:%d", host, port)
        return cls(sock, NetRole.CLIENT)

    def send(self, message: Message) -> None:
        """Fire-and-forget one message; a full send buffer drops it silently."""
        try:
            self.sock.send(bytes((encode(message),)))
        except BlockingIOError:
            return
        except OSError as exc:
            logger.warning("send %s failed: %s", message.kind.name, exc)

    def poll(self) -> Message | None:
        """Read at most one message; None when nothing usable arrived."""
        try:
            data = self.sock.recv(1)
        except BlockingIOError:
            return None
        except ConnectionResetError as exc:
            raise PeerDisconnected("peer reset the connection") from exc
        except OSError as exc:
            logger.warning("receive failed: %s", exc)
            return None
        if not data:
            raise PeerDisconnected("peer closed the connection")
        try:
            return decode(data[0])
        except ProtocolError as exc:
            logger.warning("protocol error: %s", exc)
            return None

    def close(self) -> None:
        self.sock.close()
        if self.listener is not None:
            self.listener.close()
