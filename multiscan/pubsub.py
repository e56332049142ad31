"""Interfaces for message publishers and subscribers."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Publisher(Protocol):
    """Publishes raw messages to a topic."""

    def publish(self, topic: str, msg: bytes) -> None:
        """Publish ``msg`` on ``topic``; raise on failure."""


@runtime_checkable
class Subscriber(Protocol):
    """Consumes messages until stopped.

    A subscriber stops on the first error it meets; ``err`` then tells
    what happened.
    """

    def start(self) -> None:
        """Start consuming messages."""

    def err(self) -> Exception | None:
        """Return the error that stopped consumption, if any."""

    def stop(self) -> None:
        """Shut the subscriber down gracefully."""