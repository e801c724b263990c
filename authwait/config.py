from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PollingConfig:
    """
    Timing contract for waiting on the authorization policy cache.

    Defaults model acceptable propagation latency in a healthy cluster:
    - poll every 100ms
    - give up after 5s
    - when the SubjectAccessReview endpoint is missing, pause 1s once and stop
    """

    interval_seconds: float = 0.1
    timeout_seconds: float = 5.0
    missing_endpoint_pause_seconds: float = 1.0

    def __post_init__(self) -> None:
        if self.interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be > 0 (got {self.interval_seconds})")
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0 (got {self.timeout_seconds})")
        if self.missing_endpoint_pause_seconds < 0:
            raise ValueError(f"missing_endpoint_pause_seconds must be >= 0 (got {self.missing_endpoint_pause_seconds})")
        if self.interval_seconds > self.timeout_seconds:
            raise ValueError("interval_seconds must not exceed timeout_seconds")


DEFAULT_POLLING = PollingConfig()
