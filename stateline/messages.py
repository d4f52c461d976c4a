"""Network message representation shared by delegators, workers and minions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterable, List

Address = List[str]


class Subject(IntEnum):
    """The subject frame of a message; its integer value is what goes on the wire."""

    HELLO = 0
    HEARTBEAT = 1
    REQUEST = 2
    JOB = 3
    RESULT = 4
    GOODBYE = 5


SUBJECT_COUNT = len(Subject)


def subject_string(subject: int) -> str:
    """Return the name of a subject, or ``"UNKNOWN"`` for an unrecognised value."""
    try:
        return Subject(subject).name
    except ValueError:
        return "UNKNOWN"


def address_as_string(address: Iterable[str]) -> str:
    """Join an address stack into one string, innermost hop first, with ':'."""
    return ":".join(reversed(list(address)))


@dataclass
class Message:
    """A message sent between delegators and workers.

    Each element of ``data`` travels as a separate frame; ``address`` is the
    routing envelope, outermost hop first.
    """

    subject: int
    data: List[str] = field(default_factory=list)
    address: Address = field(default_factory=list)

    def __post_init__(self) -> None:
        self.data = list(self.data)
        self.address = list(self.address)

    def __str__(self) -> str:
        return (
            f"|{address_as_string(self.address)}|{subject_string(self.subject)}"
            f"|<{len(self.data)} data frames>|"
        )