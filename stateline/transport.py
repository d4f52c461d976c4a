"""A ZeroMQ socket that sends and receives framed :class:`Message` objects."""

from __future__ import annotations

import logging
import random
from typing import Callable, List, Optional

import zmq

from .messages import Message, Subject

_log = logging.getLogger(__name__)

FailedSendCallback = Callable[[Message], None]


class BindError(RuntimeError):
    """Raised when a socket cannot bind to an address."""


def random_identifier() -> str:
    """Return a random socket identity of the form ``XXXX-XXXX`` in upper-case hex."""
    first = random.randint(0, 0x10000)
    second = random.randint(0, 0x10000)
    return f"{first:04X}-{second:04X}"


def _encode(text: str) -> bytes:
    return text.encode("utf-8", "surrogateescape")


def _decode(frame: bytes) -> str:
    return frame.decode("utf-8", "surrogateescape")


def _subject_from_frame(frame: bytes) -> int:
    value = int(frame.decode("ascii"))
    try:
        return Subject(value)
    except ValueError:
        return value


class Socket:
    """Wraps a ZeroMQ socket, framing messages as address stack, delimiter, subject, data."""

    def __init__(self, context: zmq.Context, socket_type: int, name: str, linger: int = -1) -> None:
        self._socket = context.socket(socket_type)
        self.name = name
        self._on_failed_send: Optional[FailedSendCallback] = None
        self.set_linger(linger)

    @property
    def handle(self) -> zmq.Socket:
        """The underlying ZeroMQ socket, for registering with a poller."""
        return self._socket

    def connect(self, address: str) -> None:
        self._socket.connect(address)

    def bind(self, address: str) -> None:
        try:
            self._socket.bind(address)
        except zmq.ZMQError as exc:
            raise BindError(f"Could not bind to {address}. Address already in use") from exc

    def send(self, message: Message) -> None:
        """Send a message; on failure call the fallback if one is set, else re-raise."""
        _log.debug("Socket %s sending %s", self.name, message)
        try:
            frames: List[bytes] = [_encode(hop) for hop in reversed(message.address)]
            frames.append(b"")
            frames.append(str(int(message.subject)).encode("ascii"))
            frames.extend(_encode(item) for item in message.data)
            self._socket.send_multipart(frames)
        except Exception:
            if self._on_failed_send is None:
                raise
            self._on_failed_send(message)

    def receive(self) -> Message:
        """Block until a whole message arrives and return it."""
        frames = self._socket.recv_multipart()
        try:
            delimiter = frames.index(b"")
        except ValueError:
            raise ValueError("received message has no delimiter frame") from None
        if delimiter + 1 >= len(frames):
            raise ValueError("received message has no subject frame")
        address = [_decode(frame) for frame in reversed(frames[:delimiter])]
        subject = _subject_from_frame(frames[delimiter + 1])
        data = [_decode(frame) for frame in frames[delimiter + 2:]]
        message = Message(subject, data, address)
        _log.debug("Socket %s received %s", self.name, message)
        return message

    def set_fallback(self, callback: Optional[FailedSendCallback]) -> None:
        """Set the function called with a message that failed to send."""
        self._on_failed_send = callback

    def set_linger(self, linger: int) -> None:
        self._socket.setsockopt(zmq.LINGER, linger)

    def set_hwm(self, hwm: int) -> None:
        self._socket.setsockopt(zmq.SNDHWM, hwm)

    def set_identifier(self, identifier: Optional[str] = None) -> None:
        """Set the socket identity; a random one is chosen when none is given."""
        if identifier is None:
            identifier = random_identifier()
        self._socket.setsockopt(zmq.IDENTITY, _encode(identifier))

    def close(self) -> None:
        self._socket.close()

    def __enter__(self) -> "Socket":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()