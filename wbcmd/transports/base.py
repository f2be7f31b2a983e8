"""Broker client interfaces."""

from __future__ import annotations

from typing import Protocol


class BrokerClient(Protocol):
    def connect(self, endpoint: str) -> None:
        """Open a connection and block until the broker accepts it."""

    def publish(self, topic: str, payload: str) -> None:
        """Publish payload and block until the broker acknowledges it."""

    def disconnect(self, grace_period_ms: int = 250) -> None:
        """Close the connection, waiting up to grace_period_ms for a clean shutdown."""
