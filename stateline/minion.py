"""Performs jobs handed out by a worker and returns their results."""

from __future__ import annotations

from typing import List, Optional, Tuple

import zmq

from .messages import Message, Subject
from .transport import Socket


class Minion:
    """Requests jobs from a worker, one at a time, and submits their results.

    ``job_types_range`` is a half-open ``(first, last)`` range of job types the
    minion handles; without it the minion takes every job type.
    """

    def __init__(
        self,
        context: zmq.Context,
        socket_addr: str,
        job_types_range: Optional[Tuple[int, int]] = None,
    ) -> None:
        self._socket = Socket(context, zmq.DEALER, "toWorker")
        self._current_job = ""
        self._socket.connect(socket_addr)
        if job_types_range is None:
            job_string = ""
        else:
            first, last = job_types_range
            job_string = f"{int(first)}:{int(last)}"
        self._socket.send(Message(Subject.HELLO, [job_string]))

    def next_job(self) -> Tuple[int, List[float]]:
        """Block until a job arrives and return its type and sample."""
        message = self._socket.receive()
        job_type, job_id, sample_text = message.data[0], message.data[1], message.data[2]
        self._current_job = job_id
        sample = [float(x) for x in sample_text.split(":")] if sample_text else []
        return int(job_type), sample

    def submit_result(self, result: float) -> None:
        """Send the result of the job last returned by :meth:`next_job`."""
        self._socket.send(Message(Subject.RESULT, [self._current_job, f"{float(result):f}"]))

    def close(self) -> None:
        self._socket.close()

    def __enter__(self) -> "Minion":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()