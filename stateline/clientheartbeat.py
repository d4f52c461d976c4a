"""Client-side heartbeating with the single server a worker talks to."""

from __future__ import annotations

import logging
import threading
import time

import zmq

from .messages import Message, Subject
from .router import SocketRouter
from .settings import HeartbeatSettings
from .transport import Socket

_log = logging.getLogger(__name__)

#: Address the client heartbeat socket connects to (the worker binds it).
CLIENT_HB_SOCKET_ADDR = "inproc://clienthb"

_CLIENT_SOCKET = 0


def _ms_since(moment: float) -> float:
    return (time.monotonic() - moment) * 1000.0


class ClientHeartbeat:
    """Sends heartbeats to the server and stops everything when it says goodbye."""

    def __init__(
        self,
        context: zmq.Context,
        settings: HeartbeatSettings,
        running: threading.Event,
    ) -> None:
        self._socket = Socket(context, zmq.PAIR, "toClient")
        self._router = SocketRouter("HB", [self._socket])
        self._ms_poll_rate = settings.ms_poll_rate
        self._ms_rate = settings.ms_rate
        self._running = running
        self._last_send_time = time.monotonic()
        self._last_received_time = time.monotonic()

        self._socket.connect(CLIENT_HB_SOCKET_ADDR)

        self._router.bind(_CLIENT_SOCKET, Subject.HEARTBEAT, self._heartbeat_arrived)
        self._router.bind(_CLIENT_SOCKET, Subject.GOODBYE, self._goodbye)
        self._router.bind_on_poll(self._send_heartbeat)

    def start(self) -> None:
        """Poll until the running flag is cleared, then close the socket."""
        self._last_send_time = time.monotonic()
        self._last_received_time = time.monotonic()
        try:
            self._router.poll(self._ms_poll_rate, self._running)
        finally:
            self._socket.close()

    def _heartbeat_arrived(self, message: Message) -> None:
        _log.debug("Heartbeat with delta T = %dms", _ms_since(self._last_received_time))
        self._last_received_time = time.monotonic()

    def _goodbye(self, message: Message) -> None:
        self._running.clear()

    def _send_heartbeat(self) -> None:
        if _ms_since(self._last_send_time) >= self._ms_rate:
            _log.debug("Sending heartbeat...")
            self._socket.send(Message(Subject.HEARTBEAT))
            self._last_send_time = time.monotonic()