"""ZeroMQ building blocks for distributed job evaluation: messages, sockets, routing, heartbeats, requesters and minions."""

__version__ = "0.1.0"