"""In-process event dispatch for post-punch side effects.

Handlers run synchronously right after the punch has been committed. A
failing handler is logged and skipped: the punch stays recorded and the
summary reconciliation batch repairs whatever the handler did not write.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Callable, DefaultDict, List, Type

logger = logging.getLogger(__name__)

Handler = Callable[[object], None]


class EventDispatcher:
    def __init__(self):
        self._handlers: DefaultDict[Type, List[Handler]] = defaultdict(list)

    def subscribe(self, event_type: Type, handler: Handler) -> None:
        self._handlers[event_type].append(handler)

    def publish(self, event: object) -> int:
        """Deliver ``event`` to its handlers; returns how many succeeded."""

        delivered = 0
        for handler in list(self._handlers.get(type(event), ())):
            try:
                handler(event)
                delivered += 1
            except Exception:
                logger.exception("Event handler %r failed for %r", handler, event)
        return delivered
