# stateline

Building blocks for evaluating likelihood jobs across processes with ZeroMQ.
They include message framing, a polling router, heartbeating on both ends of a
connection, a requester that submits batches of jobs and a minion that carries
them out. There are also helpers for packing numpy arrays into bytes and a
thread-safe store of JSON status documents.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Messages

`stateline.messages` defines the `Subject` enum: `HELLO`, `HEARTBEAT`,
`REQUEST`, `JOB`, `RESULT` and `GOODBYE`, with the values 0 to 5. Those
integers are what goes on the wire.

`Message(subject, data=[], address=[])` holds:

- a subject;
- a list of string data frames;
- an address stack, with the outermost hop first.

`str(message)` gives a short summary such as `|a:b|JOB|<3 data frames>|`.

- `subject_string(value)` returns the name of a subject. For an unknown value
  it returns `"UNKNOWN"`.
- `address_as_string(address)` joins the hops in reverse order with `:`.

## Sockets and routing

`stateline.transport.Socket(context, socket_type, name, linger=-1)` wraps a
ZeroMQ socket. A message goes out as these frames, in order:

1. the address hops, reversed;
2. an empty delimiter;
3. the subject number;
4. one frame for each data item.

`receive()` blocks until a whole message has arrived and rebuilds the
`Message`.

- `bind()` raises `BindError` when the address cannot be bound.
- `send()` re-raises a failure, unless a callback was set with
  `set_fallback()`. In that case the callback receives the message that failed.
- `set_identifier()` with no argument picks a random identity of the form
  `XXXX-XXXX` in upper-case hex. `random_identifier()` gives you one directly.
- Sockets are context managers and close on exit.

`stateline.router.SocketRouter(name, sockets)` polls a list of sockets.

- `bind(socket_index, subject, callback)` calls `callback(message)` for
  messages with that subject arriving on that socket.
- `bind_on_poll(callback)` runs a callback after every polling round.
- `poll(ms_wait, running)` loops until the `threading.Event` `running` is
  cleared. A negative wait blocks until a message arrives.
- A message with no bound callback raises `LookupError`.

```python
import zmq

from stateline.messages import Message, Subject
from stateline.transport import Socket

context = zmq.Context()
with Socket(context, zmq.PAIR, "server") as server, Socket(context, zmq.PAIR, "client") as client:
    server.bind("inproc://example")
    client.connect("inproc://example")
    client.send(Message(Subject.HEARTBEAT, ["ping"]))
    print(server.receive())  # ||HEARTBEAT|<1 data frames>|
context.term()
```

## Heartbeats

Each heartbeat class is created with `(context, settings, running)` and polls
from `start()` until `running` is cleared.

`stateline.serverheartbeat.ServerHeartbeat` connects a PAIR socket to
`inproc://serverhb`.

- It tracks clients announced with `HELLO` and forgets them on `GOODBYE`.
- It sends `HEARTBEAT` to every known client every `ms_rate` milliseconds.
- When a client has sent no heartbeat for longer than `ms_timeout`, it sends
  a `GOODBYE` on that client's behalf and drops it.

`stateline.clientheartbeat.ClientHeartbeat` connects a PAIR socket to
`inproc://clienthb`.

- It sends `HEARTBEAT` every `ms_rate` milliseconds.
- It clears `running` when a `GOODBYE` arrives.

In both cases your code must bind the other end of the PAIR socket in the same
ZeroMQ context.

## Requesters and minions

`stateline.requester.Requester(context, address=DELEGATOR_SOCKET_ADDR)`
connects a DEALER socket. The default address is
`ipc:///tmp/sl_delegator.socket`.

- `submit(job_id, job_types, data)` sends a `REQUEST`. The job types are joined
  with `:`, and so are the sample values, each written with six decimal places.
- `retrieve()` blocks and returns `(batch_id, results)`, with the results as
  floats.

`stateline.minion.Minion(context, socket_addr, job_types_range=None)`
connects a DEALER socket and announces itself with `HELLO`. The `HELLO` carries
either `"first:last"` for a half-open range of job types, or an empty string
for every job type.

- `next_job()` blocks until a `JOB` arrives and returns
  `(job_type, sample)`.
- `submit_result(value)` sends the `RESULT` for that job.

## Settings

`stateline.settings` holds three dataclasses, each with a constructor for the
usual defaults.

| Constructor | Defaults |
|---|---|
| `HeartbeatSettings.worker_default()` | rate 1000 ms, poll 500 ms, timeout 3000 ms |
| `HeartbeatSettings.delegator_default()` | rate 1000 ms, poll 500 ms, timeout 5000 ms |
| `DelegatorSettings.default(port)` | poll 10 ms, one job type |
| `WorkerSettings.default(network_address, worker_address)` | poll -1 (block) |

## Serialisation and status documents

`stateline.serial` packs arrays into bytes and back:

- `serialise_vector(vector)` writes raw little-endian doubles.
- `serialise_matrix(matrix)` writes a uint32 row count, then the values in
  column-major order.
- `unserialise_vector` and `unserialise_matrix` decode them. Both raise
  `ValueError` on malformed lengths.

`stateline.api.ApiResources` stores named JSON documents as compact text:

- `set(name, data)` stores a document.
- `get(name)` returns the stored text, or `""` if the name is unset.
- `get_all()` returns every document as one JSON object, with the names in
  sorted order.

## What this package does not do

The package provides the pieces at either end of a job pipeline, but not the
processes that connect them. It has:

- no component that accepts requests, chooses a worker and hands out jobs;
- no component that relays jobs between the network and a minion;
- no command-line programs;
- no reading of JSON configuration files;
- no logging setup or signal handling.

To run a full pipeline, you write the intermediary that binds the addresses
the requester, minions and heartbeats connect to.