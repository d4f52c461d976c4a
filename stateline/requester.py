"""Submits batches of jobs to a delegator and retrieves their results."""

from __future__ import annotations

from typing import Iterable, List, Tuple

import zmq

from .messages import Message, Subject
from .transport import Socket

#: Address that the delegator binds for requesters.
DELEGATOR_SOCKET_ADDR = "ipc:///tmp/sl_delegator.socket"


def _number_text(value: float) -> str:
    return f"{float(value):f}"


class Requester:
    """Talks to a delegator, which may live in another thread.

    Batches carry an id because results can come back in any order.
    """

    def __init__(self, context: zmq.Context, address: str = DELEGATOR_SOCKET_ADDR) -> None:
        self._socket = Socket(context, zmq.DEALER, "toDelegator")
        self._socket.set_identifier()
        self._socket.connect(address)

    def submit(self, job_id: int, job_types: Iterable[int], data: Iterable[float]) -> None:
        """Submit the sample ``data`` to be evaluated for every job type, without waiting."""
        types_text = ":".join(str(int(t)) for t in job_types)
        data_text = ":".join(_number_text(x) for x in data)
        self._socket.send(Message(Subject.REQUEST, [types_text, data_text], [str(job_id)]))

    def retrieve(self) -> Tuple[int, List[float]]:
        """Block until a batch of results arrives and return its id and results."""
        message = self._socket.receive()
        batch_id = int(message.address[0])
        return batch_id, [float(x) for x in message.data]

    def close(self) -> None:
        self._socket.close()

    def __enter__(self) -> "Requester":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()