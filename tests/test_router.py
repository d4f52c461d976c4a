import threading

import pytest
import zmq

from stateline.messages import Message, Subject
from stateline.router import SocketRouter
from stateline.transport import Socket


@pytest.fixture
def context():
    ctx = zmq.Context()
    yield ctx
    ctx.destroy(linger=0)


def _pair(context, address):
    inside = Socket(context, zmq.PAIR, "inside")
    outside = Socket(context, zmq.PAIR, "outside", linger=0)
    inside.bind(address)
    outside.connect(address)
    return inside, outside


def test_router_sets_linger_zero(context):
    inside, _ = _pair(context, "inproc://linger")
    assert inside.handle.getsockopt(zmq.LINGER) == -1
    SocketRouter("r", [inside])
    assert inside.handle.getsockopt(zmq.LINGER) == 0


def test_dispatch_by_socket_and_subject(context):
    in0, out0 = _pair(context, "inproc://s0")
    in1, out1 = _pair(context, "inproc://s1")
    router = SocketRouter("main", [in0, in1])
    seen = []
    router.bind(0, Subject.JOB, lambda m: seen.append(("job0", m.data)))
    router.bind(1, Subject.JOB, lambda m: seen.append(("job1", m.data)))
    router.bind(1, Subject.HEARTBEAT, lambda m: seen.append(("hb1", m.data)))

    running = threading.Event()
    running.set()
    rounds = []

    def on_poll():
        rounds.append(True)
        if len(seen) >= 2:
            running.clear()

    router.bind_on_poll(on_poll)
    out1.send(Message(Subject.HEARTBEAT))
    out0.send(Message(Subject.JOB, ["a"]))
    router.poll(100, running)

    assert sorted(seen) == [("hb1", []), ("job0", ["a"])]
    assert not running.is_set()
    assert rounds


def test_poll_returns_when_not_running(context):
    inside, _ = _pair(context, "inproc://idle")
    router = SocketRouter("idle", [inside])
    calls = []
    router.bind_on_poll(lambda: calls.append(1))
    router.poll(-1, threading.Event())
    assert calls == []


def test_unbound_subject_raises(context):
    inside, outside = _pair(context, "inproc://unbound")
    router = SocketRouter("strict", [inside])
    running = threading.Event()
    running.set()
    outside.send(Message(Subject.GOODBYE))
    with pytest.raises(LookupError):
        router.poll(100, running)


def test_bind_invalid_index(context):
    inside, _ = _pair(context, "inproc://index")
    router = SocketRouter("r", [inside])
    with pytest.raises(IndexError):
        router.bind(1, Subject.HELLO, lambda m: None)


def test_rebinding_replaces_callback(context):
    inside, outside = _pair(context, "inproc://rebind")
    router = SocketRouter("r", [inside])
    seen = []
    router.bind(0, Subject.RESULT, lambda m: seen.append("old"))
    router.bind(0, Subject.RESULT, lambda m: seen.append("new"))
    running = threading.Event()
    running.set()
    router.bind_on_poll(lambda: running.clear() if seen else None)
    outside.send(Message(Subject.RESULT, ["1", "2.0"]))
    router.poll(100, running)
    assert seen == ["new"]