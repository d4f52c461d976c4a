import pytest
import zmq

from stateline.messages import Subject
from stateline.requester import Requester
from stateline.transport import Socket

ADDRESS = "inproc://test-delegator"


@pytest.fixture
def context():
    ctx = zmq.Context()
    yield ctx
    ctx.destroy(linger=0)


@pytest.fixture
def router(context):
    sock = context.socket(zmq.ROUTER)
    sock.setsockopt(zmq.LINGER, 0)
    sock.bind(ADDRESS)
    yield sock
    sock.close()


@pytest.fixture
def delegator_side(context):
    sock = Socket(context, zmq.ROUTER, "delegator", linger=0)
    sock.bind(ADDRESS)
    yield sock
    sock.close()


def _receive(sock):
    assert sock.poll(3000)
    return sock.recv_multipart()


def test_submit_frames(context, delegator_side):
    with Requester(context, ADDRESS) as requester:
        requester.submit(7, [0, 1, 2], [1.5, -2.0])
        assert delegator_side.handle.poll(3000)
        message = delegator_side.receive()
    assert message.subject == Subject.REQUEST
    assert message.data == ["0:1:2", "1.500000:-2.000000"]
    assert message.address[0] == "7"
    assert len(message.address) == 2


def test_submit_empty_sample(context, delegator_side):
    with Requester(context, ADDRESS) as requester:
        requester.submit(0, [3], [])
        assert delegator_side.handle.poll(3000)
        message = delegator_side.receive()
    assert message.subject == Subject.REQUEST
    assert message.data == ["3", ""]
    assert message.address[0] == "0"


def test_retrieve_round_trip(context, router):
    with Requester(context, ADDRESS) as requester:
        requester.submit(12, [0, 1], [0.25])
        frames = _receive(router)
        identity, batch = frames[0], frames[1]
        router.send_multipart([identity, batch, b"", b"4", b"1.0", b"2.5"])
        assert requester.retrieve() == (12, [1.0, 2.5])


def test_retrieve_bad_id(context, router):
    with Requester(context, ADDRESS) as requester:
        requester.submit(1, [0], [0.0])
        identity = _receive(router)[0]
        router.send_multipart([identity, b"abc", b"", b"4", b"1.0"])
        with pytest.raises(ValueError):
            requester.retrieve()