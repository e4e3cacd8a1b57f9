"""
Nectar Events - Event Dispatch and Subscriptions
================================================

Every `Observable` owns an `EventDispatcher`: a mapping from event name to the
ordered list of subscriptions registered for it. Subscriptions run
synchronously, in registration order, when the event is triggered.

Event Names
-----------

Assigning ``value`` to an observed attribute ``name`` triggers, in order:

- ``"change"`` with arguments ``(name, value)``
- ``"change:<name>"`` with ``(value,)``
- ``"change:<name>:<value>"`` with no arguments

The last one embeds ``str(value)`` and is most useful for small scalar values
such as flags and enum-like strings. Classes can turn it off with
``emit_value_events = False``.

Guards
------

A subscription may carry a guard, checked against the event target each time
the event fires. The callback only runs while the guard holds; a failing guard
leaves the subscription in place. Guards are written either inline, as
``"event&&attribute"``, or with the ``guard=`` keyword of `listen_to`, which
also accepts a predicate:

```python
view.listen_to(model, "change&&visible", view.render)
view.listen_to(model, "change", view.render, guard=lambda m: m.visible)
```
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from .maybe import MISSING

CHANGE_EVENT = "change"
EVENT_SEPARATOR = ":"
GUARD_SEPARATOR = "&&"

Guard = Callable[[Any], bool]
GuardSpec = Union[str, Guard, None]


def change_event(name: Optional[str] = None, value: Any = MISSING) -> str:
    """
    Build a change event name.

    ``change_event()`` is ``"change"``, ``change_event("x")`` is ``"change:x"``
    and ``change_event("x", 3)`` is ``"change:x:3"``.
    """
    if name is None:
        return CHANGE_EVENT
    event_name = f"{CHANGE_EVENT}{EVENT_SEPARATOR}{name}"
    if value is MISSING:
        return event_name
    return f"{event_name}{EVENT_SEPARATOR}{value}"


def parse_event_name(event_name: str) -> Tuple[str, Optional[str]]:
    """
    Split ``"event&&attribute"`` into the event and the guard attribute.

    An empty attribute (``"event&&"``) means no guard. Only the first
    attribute is used; any further ``&&`` segments are ignored with a warning.
    """
    event, *conditions = event_name.split(GUARD_SEPARATOR)
    if not conditions:
        return event_name, None
    if len(conditions) > 1:
        logging.warning(
            f"Only the first guard of '{event_name}' is used: '{conditions[0]}'"
        )
    return event, conditions[0] or None


def make_guard(guard: GuardSpec) -> Optional[Guard]:
    """Normalise a guard given as an attribute name or a predicate."""
    if guard is None:
        return None
    if isinstance(guard, str):
        attribute = guard
        return lambda target: bool(getattr(target, attribute, None))
    if callable(guard):
        return guard
    raise TypeError(
        f"guard must be an attribute name or a callable, got {type(guard).__name__}"
    )


@dataclass(eq=False)
class Subscription:
    """
    A callback registered for one event on one target.

    ``once`` subscriptions cancel themselves the first time their guard passes,
    before the callback runs. Cancelled subscriptions are inert even if a
    dispatch already in progress still holds them.
    """

    target: Any
    event_name: str
    callback: Callable[..., Any]
    guard: Optional[Guard] = None
    once: bool = False
    listener: Any = None
    active: bool = True
    dispatcher: Optional["EventDispatcher"] = field(default=None, repr=False)

    def __call__(self, *args: Any) -> None:
        if not self.active:
            return
        if self.guard is not None and not self.guard(self.target):
            return
        if self.once:
            self.cancel()
        self.callback(*args)

    def cancel(self) -> bool:
        """Remove the subscription. Returns False if it was already inactive."""
        if not self.active:
            return False
        self.active = False
        if self.dispatcher is not None:
            self.dispatcher.remove(self)
        return True


class EventDispatcher:
    """Ordered event-name to subscriptions mapping owned by one observable."""

    def __init__(self) -> None:
        self._subscriptions: Dict[str, List[Subscription]] = {}

    def add(self, subscription: Subscription) -> Subscription:
        subscription.dispatcher = self
        self._subscriptions.setdefault(subscription.event_name, []).append(
            subscription
        )
        logging.debug(f"Subscribed to '{subscription.event_name}'")
        return subscription

    def remove(self, subscription: Subscription) -> bool:
        subscriptions = self._subscriptions.get(subscription.event_name)
        if not subscriptions or subscription not in subscriptions:
            return False

        subscriptions.remove(subscription)
        if not subscriptions:
            del self._subscriptions[subscription.event_name]
        subscription.active = False
        logging.debug(f"Unsubscribed from '{subscription.event_name}'")
        return True

    def trigger(self, event_name: str, *args: Any) -> None:
        """Invoke the subscriptions for `event_name` in registration order."""
        subscriptions = self._subscriptions.get(event_name)
        if not subscriptions:
            return

        # Callbacks may add or cancel subscriptions while we iterate
        for subscription in list(subscriptions):
            subscription(*args)

    def listeners(self, event_name: str) -> List[Subscription]:
        return list(self._subscriptions.get(event_name, ()))

    def has_listeners(self, event_name: Optional[str] = None) -> bool:
        if event_name is None:
            return bool(self._subscriptions)
        return bool(self._subscriptions.get(event_name))

    def clear(self, event_name: Optional[str] = None) -> None:
        if event_name is None:
            names = list(self._subscriptions)
        else:
            names = [event_name] if event_name in self._subscriptions else []
        for name in names:
            for subscription in self._subscriptions.pop(name):
                subscription.active = False

    def event_names(self) -> List[str]:
        return list(self._subscriptions)

    def __len__(self) -> int:
        return sum(len(subs) for subs in self._subscriptions.values())
