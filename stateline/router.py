"""Polls several sockets and dispatches each message by socket and subject."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Dict, Sequence, Tuple

import zmq

from .messages import Message
from .transport import Socket

_log = logging.getLogger(__name__)

Callback = Callable[[Message], None]


class SocketRouter:
    """Routes messages from a fixed list of sockets to bound callbacks."""

    def __init__(self, name: str, sockets: Sequence[Socket]) -> None:
        self.name = name
        self._sockets = list(sockets)
        self._callbacks: Dict[Tuple[int, int], Callback] = {}
        self._on_poll: Callable[[], None] = lambda: None
        self._poller = zmq.Poller()
        for sock in self._sockets:
            sock.set_linger(0)
            self._poller.register(sock.handle, zmq.POLLIN)

    def bind(self, socket_index: int, subject: int, callback: Callback) -> None:
        """Call ``callback`` for messages with ``subject`` arriving on socket ``socket_index``."""
        if not 0 <= socket_index < len(self._sockets):
            raise IndexError(f"router {self.name} has no socket {socket_index}")
        self._callbacks[(socket_index, int(subject))] = callback

    def bind_on_poll(self, callback: Callable[[], None]) -> None:
        """Call ``callback`` once after every polling round."""
        self._on_poll = callback

    def poll(self, ms_wait: int, running: threading.Event) -> None:
        """Poll until ``running`` is cleared; a negative wait blocks until a message arrives."""
        timeout = None if ms_wait < 0 else ms_wait
        _log.debug("Router %s's poll thread has started", self.name)
        while running.is_set():
            ready = dict(self._poller.poll(timeout))
            for index, sock in enumerate(self._sockets):
                if ready.get(sock.handle, 0) & zmq.POLLIN:
                    message = sock.receive()
                    _log.debug(
                        "Router %s received new message from socket %s: %s",
                        self.name, sock.name, message,
                    )
                    self._dispatch(index, message)
            self._on_poll()
        _log.info("Router %s's Poll thread has exited loop, must be shutting down", self.name)

    def _dispatch(self, index: int, message: Message) -> None:
        try:
            callback = self._callbacks[(index, int(message.subject))]
        except KeyError:
            raise LookupError(
                f"router {self.name} has no callback for subject {message.subject} "
                f"on socket {index}"
            ) from None
        callback(message)