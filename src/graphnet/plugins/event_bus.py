"""Synchronous event dispatch via pluggy plus plain callback subscriptions.

Events are delivered on the same tick as the mutation that produced them,
in mutation order: registered pluggy hooks first, then subscribed
callbacks in subscription order.

INVARIANT: Listener failures are warnings, never errors. A failing
listener never aborts or undoes the mutation that triggered it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from graphnet.domain.models import GraphEvent
from graphnet.domain.types import EventType
from graphnet.plugins.hookspecs import HOOK_NAMES
from graphnet.services._helpers import now_iso

if TYPE_CHECKING:
    from graphnet.plugins.manager import PluginManager

logger = logging.getLogger(__name__)

type EventCallback = Callable[[GraphEvent], Any]


@dataclass(frozen=True, eq=False)
class _Subscription:
    callback: EventCallback
    once: bool = False


class EventBus:
    """Dispatches :class:`GraphEvent` records to plugins and callbacks.

    Parameters:
        plugin_manager: Loaded PluginManager for hook dispatch, or None for
            callback-only delivery.
        enabled: When False, ``emit`` builds nothing and delivers nothing.
    """

    def __init__(
        self,
        plugin_manager: PluginManager | None = None,
        *,
        enabled: bool = True,
    ) -> None:
        self._pm = plugin_manager
        self._enabled = enabled
        self._subscribers: dict[EventType, list[_Subscription]] = {}
        self._dispatched = 0
        self._failures = 0

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def plugin_manager(self) -> PluginManager | None:
        return self._pm

    def subscribe(
        self,
        event_type: EventType | str,
        callback: EventCallback,
        *,
        once: bool = False,
    ) -> Callable[[], None]:
        """Register *callback* for *event_type*. Returns an unsubscribe function.

        With *once*, the callback is dropped before its first delivery.
        """
        key = EventType(event_type)
        subscription = _Subscription(callback, once)
        self._subscribers.setdefault(key, []).append(subscription)

        def unsubscribe() -> None:
            subscriptions = self._subscribers.get(key, [])
            if subscription in subscriptions:
                subscriptions.remove(subscription)

        return unsubscribe

    def once(self, event_type: EventType | str, callback: EventCallback) -> Callable[[], None]:
        return self.subscribe(event_type, callback, once=True)

    def unsubscribe_all(self, event_type: EventType | str | None = None) -> int:
        """Drop every callback for *event_type*, or for all types. Returns the count removed.

        Plugin hooks are unaffected.
        """
        if event_type is None:
            removed = sum(len(v) for v in self._subscribers.values())
            self._subscribers.clear()
        else:
            removed = len(self._subscribers.pop(EventType(event_type), []))
        logger.debug("Removed %d subscriptions", removed)
        return removed

    def listener_count(self, event_type: EventType | str) -> int:
        """Subscribed callbacks for *event_type* (plugin hooks not included)."""
        return len(self._subscribers.get(EventType(event_type), []))

    def has_listeners(self, event_type: EventType | str) -> bool:
        return self.listener_count(event_type) > 0

    def emit(
        self,
        event_type: EventType,
        *,
        ids: list[str] | None = None,
        before: Any = None,
        after: Any = None,
        **detail: Any,
    ) -> GraphEvent | None:
        """Build a timestamped event and dispatch it. Returns the event."""
        if not self._enabled:
            return None
        event = GraphEvent(
            type=event_type,
            ids=ids or [],
            before=before,
            after=after,
            detail=detail,
            timestamp=now_iso(),
        )
        self.dispatch(event)
        return event

    def dispatch(self, event: GraphEvent) -> None:
        """Deliver *event* to hooks, then subscribers."""
        if not self._enabled:
            return
        self._dispatched += 1

        if self._pm is not None:
            hook_fn = getattr(self._pm.hook, HOOK_NAMES[event.type], None)
            if hook_fn is not None:
                self._safe_call(hook_fn, event, name=HOOK_NAMES[event.type], as_hook=True)

        subscriptions = self._subscribers.get(event.type, [])
        for subscription in list(subscriptions):
            if subscription.once:
                if subscription not in subscriptions:
                    continue
                subscriptions.remove(subscription)
            callback = subscription.callback
            self._safe_call(callback, event, name=getattr(callback, "__name__", repr(callback)))

    def stats(self) -> dict[str, int]:
        """Delivery counters (events dispatched, listener failures)."""
        return {
            "dispatched": self._dispatched,
            "failures": self._failures,
            "subscriptions": sum(len(v) for v in self._subscribers.values()),
        }

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _safe_call(
        self,
        fn: Callable[..., Any],
        event: GraphEvent,
        *,
        name: str,
        as_hook: bool = False,
    ) -> None:
        try:
            if as_hook:
                fn(event=event)
            else:
                fn(event)
        except Exception:
            self._failures += 1
            logger.warning("Listener %s failed for %s", name, event.type, exc_info=True)
