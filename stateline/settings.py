"""Settings for the communications system."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class HeartbeatSettings:
    """Controls the heartbeat threads (all times in milliseconds)."""

    ms_rate: int
    ms_poll_rate: int
    ms_timeout: int

    @classmethod
    def worker_default(cls) -> "HeartbeatSettings":
        return cls(ms_rate=1000, ms_poll_rate=500, ms_timeout=3000)

    @classmethod
    def delegator_default(cls) -> "HeartbeatSettings":
        return cls(ms_rate=1000, ms_poll_rate=500, ms_timeout=5000)


@dataclass
class DelegatorSettings:
    """Controls the behaviour of a delegator."""

    ms_poll_rate: int
    port: int
    heartbeat: HeartbeatSettings = field(default_factory=HeartbeatSettings.delegator_default)
    n_job_types: int = 1

    @classmethod
    def default(cls, port: int) -> "DelegatorSettings":
        return cls(
            ms_poll_rate=10,
            port=port,
            heartbeat=HeartbeatSettings.delegator_default(),
            n_job_types=1,
        )


@dataclass
class WorkerSettings:
    """Controls the behaviour of a worker; a poll rate of -1 blocks indefinitely."""

    ms_poll_rate: int
    network_address: str
    worker_address: str
    heartbeat: HeartbeatSettings = field(default_factory=HeartbeatSettings.worker_default)

    @classmethod
    def default(cls, network_address: str, worker_address: str) -> "WorkerSettings":
        return cls(
            ms_poll_rate=-1,
            network_address=network_address,
            worker_address=worker_address,
            heartbeat=HeartbeatSettings.worker_default(),
        )