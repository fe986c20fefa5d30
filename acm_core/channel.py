"""Host broadcast message channel."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScriptMessage:
    """A broadcast carrying an address (``id``) and a string payload."""

    id: str
    message: str = ""


MessageHandler = Callable[[ScriptMessage], None]


class HostChannel(ABC):
    """Interface to the host's broadcast primitive."""

    @abstractmethod
    def send(self, message_id: str, message: str = "") -> None:
        """Broadcast ``message`` on ``message_id`` to every listener."""

    @abstractmethod
    def subscribe(self, handler: MessageHandler) -> MessageHandler:
        """Register a listener for every broadcast."""

    @abstractmethod
    def unsubscribe(self, handler: MessageHandler) -> None:
        """Remove a previously registered listener."""


class LocalBroadcastChannel(HostChannel):
    """Synchronous in-process broadcast: every listener sees every message."""

    def __init__(self) -> None:
        self._handlers: list[MessageHandler] = []

    def send(self, message_id: str, message: str = "") -> None:
        event = ScriptMessage(id=message_id, message=message)
        logger.debug("broadcast %s (%d chars)", message_id, len(message))
        for handler in list(self._handlers):
            try:
                handler(event)
            except Exception:
                logger.exception("listener %r failed on %s", handler, message_id)

    def subscribe(self, handler: MessageHandler) -> MessageHandler:
        if handler not in self._handlers:
            self._handlers.append(handler)
        return handler

    def unsubscribe(self, handler: MessageHandler) -> None:
        if handler in self._handlers:
            self._handlers.remove(handler)
