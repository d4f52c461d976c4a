import threading

import pytest
import zmq

from stateline.messages import Message, Subject
from stateline.serverheartbeat import SERVER_HB_SOCKET_ADDR, ServerHeartbeat
from stateline.settings import HeartbeatSettings
from stateline.transport import Socket


@pytest.fixture
def context():
    ctx = zmq.Context()
    yield ctx
    ctx.destroy(linger=0)


@pytest.fixture
def peer(context):
    sock = Socket(context, zmq.PAIR, "peer", 0)
    sock.bind(SERVER_HB_SOCKET_ADDR)
    yield sock
    sock.close()


def _start(context, settings):
    running = threading.Event()
    running.set()
    hb = ServerHeartbeat(context, settings, running)
    thread = threading.Thread(target=hb.start, daemon=True)
    thread.start()
    return running, thread


def _stop(running, thread):
    running.clear()
    thread.join(5)
    return thread.is_alive()


def test_sends_heartbeat_to_new_client(context, peer):
    settings = HeartbeatSettings(ms_rate=30, ms_poll_rate=10, ms_timeout=10000)
    running, thread = _start(context, settings)
    try:
        peer.send(Message(Subject.HELLO, [], ["worker-a"]))
        assert peer.handle.poll(3000)
        message = peer.receive()
        assert message.subject == Subject.HEARTBEAT
        assert message.address == ["worker-a"]
    finally:
        assert not _stop(running, thread)


def test_no_heartbeats_without_clients(context, peer):
    settings = HeartbeatSettings(ms_rate=10, ms_poll_rate=10, ms_timeout=10000)
    running, thread = _start(context, settings)
    try:
        assert peer.handle.poll(300) == 0
    finally:
        assert not _stop(running, thread)


def test_silent_client_times_out_once(context, peer):
    settings = HeartbeatSettings(ms_rate=100000, ms_poll_rate=10, ms_timeout=50)
    running, thread = _start(context, settings)
    try:
        peer.send(Message(Subject.HELLO, [], ["worker-b"]))
        assert peer.handle.poll(3000)
        message = peer.receive()
        assert message.subject == Subject.GOODBYE
        assert message.address == ["worker-b"]
        assert peer.handle.poll(300) == 0
    finally:
        assert not _stop(running, thread)


def test_goodbye_removes_client(context, peer):
    settings = HeartbeatSettings(ms_rate=100000, ms_poll_rate=10, ms_timeout=300)
    running, thread = _start(context, settings)
    try:
        peer.send(Message(Subject.HELLO, [], ["worker-c"]))
        peer.send(Message(Subject.GOODBYE, [], ["worker-c"]))
        assert peer.handle.poll(700) == 0
    finally:
        assert not _stop(running, thread)


def test_stops_when_running_cleared(context, peer):
    settings = HeartbeatSettings(ms_rate=1000, ms_poll_rate=10, ms_timeout=5000)
    running, thread = _start(context, settings)
    assert thread.is_alive()
    assert _stop(running, thread) is False