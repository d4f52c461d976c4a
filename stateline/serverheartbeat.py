"""Server-side heartbeating: tracks connected clients and times out silent ones."""

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

#: Address the server heartbeat socket connects to (the delegator binds it).
SERVER_HB_SOCKET_ADDR = "inproc://serverhb"

_CLIENT_SOCKET = 0


def _ms_since(moment: float) -> float:
    return (time.monotonic() - moment) * 1000.0


class ServerHeartbeat:
    """Sends heartbeats to every known client and says goodbye for those that time out.

    Clients are announced with HELLO, removed with GOODBYE, and kept alive
    by HEARTBEAT messages; the client's identity is the last address hop.
    """

    def __init__(
        self,
        context: zmq.Context,
        settings: HeartbeatSettings,
        running: threading.Event,
    ) -> None:
        self._socket = Socket(context, zmq.PAIR, "toServer")
        self._router = SocketRouter("HB", [self._socket])
        self._ms_poll_rate = settings.ms_poll_rate
        self._ms_rate = settings.ms_rate
        self._ms_timeout = settings.ms_timeout
        self._running = running
        self._clients: set[str] = set()
        self._last_heartbeats: dict[str, float] = {}
        self._last_send_time = time.monotonic()

        self._socket.connect(SERVER_HB_SOCKET_ADDR)

        self._router.bind(_CLIENT_SOCKET, Subject.HELLO, self._insert_client)
        self._router.bind(_CLIENT_SOCKET, Subject.GOODBYE, self._delete_client)
        self._router.bind(_CLIENT_SOCKET, Subject.HEARTBEAT, self._receive_heartbeat)
        self._router.bind_on_poll(self._on_poll)

    def start(self) -> None:
        """Poll until the running flag is cleared, then close the socket."""
        self._last_send_time = time.monotonic()
        try:
            self._router.poll(self._ms_poll_rate, self._running)
        finally:
            self._socket.close()

    def _on_poll(self) -> None:
        self._monitor_timeouts()
        self._send_heartbeats()

    def _insert_client(self, message: Message) -> None:
        client = message.address[-1]
        _log.debug("HB system adding new client")
        self._clients.add(client)
        self._last_heartbeats.setdefault(client, time.monotonic())
        _log.debug("HB system added %s", client)

    def _delete_client(self, message: Message) -> None:
        client = message.address[-1]
        _log.debug("HB system received GOODBYE from %s", client)
        self._clients.discard(client)
        self._last_heartbeats.pop(client, None)

    def _receive_heartbeat(self, message: Message) -> None:
        client = message.address[-1]
        previous = self._last_heartbeats.get(client)
        if previous is not None:
            _log.debug("Heartbeat from %s with delta T = %dms", client, _ms_since(previous))
        self._last_heartbeats[client] = time.monotonic()

    def _monitor_timeouts(self) -> None:
        expired = [
            client
            for client in sorted(self._clients)
            if _ms_since(self._last_heartbeats.get(client, float("-inf"))) > self._ms_timeout
        ]
        for client in expired:
            _log.debug("Heartbeat system sending GOODBYE on behalf of %s", client)
            self._socket.send(Message(Subject.GOODBYE, [], [client]))
            self._last_heartbeats.pop(client, None)
            self._clients.discard(client)

    def _send_heartbeats(self) -> None:
        if _ms_since(self._last_send_time) < self._ms_rate:
            return
        for client in sorted(self._clients):
            _log.debug("Sending HEARTBEAT to %s", client)
            self._socket.send(Message(Subject.HEARTBEAT, [], [client]))
            self._last_send_time = time.monotonic()