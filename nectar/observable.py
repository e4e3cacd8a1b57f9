"""
Nectar Observable - Reactive Object Base Class
==============================================

`Observable` is a base class for plain application objects that need change
notification: UI state, small models, settings objects. Subclasses declare
observed attributes with `prop()` or `@observed`, and every assignment to one
of them triggers change events that other objects can listen to.

```python
from nectar import Observable, prop

class Point(Observable):
    x = prop(0)
    y = prop(0)

class Label(Observable):
    def __init__(self, point):
        super().__init__()
        self.text = ""
        self.listen_to(point, "change", self.refresh)

    def refresh(self, name, value):
        self.text = f"{name} is now {value}"

p = Point()
label = Label(p)
p.x = 3
label.text  # "x is now 3"
```

How It Works
------------

1. **Declaration** - `ObservableMeta` records, for each class body, the names of
   the observed attributes it declares. Nothing is inspected at runtime.
2. **Wrapping** - the first time an instance of a class is built, the declared
   properties along its chain are swapped for notifying ones. The shared
   `registry` makes sure this happens once per class, however many instances
   follow.
3. **Dispatch** - a notifying setter stores the value and then triggers
   ``change``, ``change:<name>`` and ``change:<name>:<value>`` on the instance
   that was assigned to. Listeners run synchronously before the assignment
   returns.

Subclasses that define ``__init__`` must call ``super().__init__()``. Observed
attributes assigned before that call are stored normally and notify like any
other assignment.

Listening
---------

- `listen_to(target, event, callback)` runs `callback` every time `event` fires
  on `target`.
- `listen_to_once(...)` runs it the first time only.
- Either accepts a guard, inline (``"change&&enabled"``) or as ``guard=``.
- `stop_listening(...)` cancels this object's subscriptions; `listen_to`
  also returns the `Subscription`, whose `cancel()` removes just that one.
"""

from typing import Any, Callable, Dict, List, Mapping, Optional

from .descriptors import ObservedProperty, declared_names
from .errors import InvalidTarget
from .events import (
    EventDispatcher,
    GuardSpec,
    Subscription,
    change_event,
    make_guard,
    parse_event_name,
)
from .registry import chain_path, observed_names, registry
from .snapshot import Snapshot


class ObservableMeta(type):
    """
    Metaclass recording the observed attributes each Observable subclass declares.
    """

    def __new__(mcs, name: str, bases: tuple, namespace: dict, **kwargs: Any) -> type:
        cls = super().__new__(mcs, name, bases, namespace, **kwargs)

        # The base class itself is not part of any chain
        if any(isinstance(base, ObservableMeta) for base in bases):
            cls._observed_names = declared_names(namespace)
            cls._chain_path = chain_path(cls)

        return cls


class Observable(metaclass=ObservableMeta):
    """
    Base class for objects whose observed attributes emit change events.

    Class options:
        emit_value_events: When False, assignments skip the value-keyed
            ``change:<name>:<value>`` event.
    """

    emit_value_events: bool = True

    def __init__(self) -> None:
        registry.ensure_wrapped(type(self))

    # Per-instance state is created on first use, so observed attributes
    # assigned before super().__init__() behave the same on every construction
    @property
    def _dispatcher(self) -> EventDispatcher:
        dispatcher = self.__dict__.get("_nectar_dispatcher")
        if dispatcher is None:
            dispatcher = self.__dict__["_nectar_dispatcher"] = EventDispatcher()
        return dispatcher

    @property
    def _listening(self) -> List[Subscription]:
        return self.__dict__.setdefault("_nectar_listening", [])

    @property
    def _props(self) -> Optional[List[str]]:
        return self.__dict__.get("_nectar_props")

    def props(self) -> List[str]:
        """Names of all observed attributes, most derived class first."""
        if self._props is None:
            self.__dict__["_nectar_props"] = observed_names(type(self))
        return list(self._props)

    def to_dict(self) -> Dict[str, Any]:
        """Plain mapping of every observed attribute to its current value."""
        return {name: getattr(self, name) for name in self.props()}

    def snapshot(self) -> Snapshot:
        return Snapshot(self)

    def assign(self, name: str, value: Any) -> None:
        """
        Assign an observed attribute, raising `ValidationRejected` if the
        value fails validation instead of logging it.
        """
        for klass in type(self).__mro__:
            descriptor = vars(klass).get(name)
            if descriptor is not None:
                break
        if not isinstance(descriptor, ObservedProperty):
            raise AttributeError(
                f"'{type(self).__name__}' has no observed attribute '{name}'"
            )
        descriptor.assign(self, value)

    def load_state(self, state: Mapping[str, Any]) -> None:
        """Assign each observed attribute present in `state`; other keys are ignored."""
        props = self.props()
        for name, value in state.items():
            if name in props:
                setattr(self, name, value)

    def trigger(self, event_name: str, *args: Any) -> None:
        """Trigger `event_name` on this object, passing `args` to each callback."""
        self._dispatcher.trigger(event_name, *args)

    def _notify_change(self, name: str, value: Any) -> None:
        self.trigger(change_event(), name, value)
        self.trigger(change_event(name), value)
        if self.emit_value_events:
            self.trigger(change_event(name, value))

    def listen_to(
        self,
        target: "Observable",
        event_name: str,
        callback: Callable[..., Any],
        guard: GuardSpec = None,
    ) -> Subscription:
        """
        Listen to `event_name` on `target`, calling `callback` when it fires.

        Appending ``&&attribute`` to `event_name` (or passing ``guard``) only
        runs `callback` while the guard holds on `target`.
        """
        return self._listen(target, event_name, callback, guard, once=False)

    def listen_to_once(
        self,
        target: "Observable",
        event_name: str,
        callback: Callable[..., Any],
        guard: GuardSpec = None,
    ) -> Subscription:
        """
        Like `listen_to`, but the callback is removed after its first run.
        """
        return self._listen(target, event_name, callback, guard, once=True)

    def _listen(
        self,
        target: "Observable",
        event_name: str,
        callback: Callable[..., Any],
        guard: GuardSpec,
        once: bool,
    ) -> Subscription:
        if target is None or not isinstance(target, Observable):
            raise InvalidTarget(target)

        event_name, condition = parse_event_name(event_name)
        if condition is not None:
            if guard is not None:
                raise ValueError(
                    f"Guard given twice for '{event_name}': inline '{condition}' and guard="
                )
            guard = condition

        subscription = Subscription(
            target=target,
            event_name=event_name,
            callback=callback,
            guard=make_guard(guard),
            once=once,
            listener=self,
        )
        target._dispatcher.add(subscription)

        self._listening[:] = [s for s in self._listening if s.active]
        self._listening.append(subscription)
        return subscription

    def stop_listening(
        self,
        target: Optional["Observable"] = None,
        event_name: Optional[str] = None,
        callback: Optional[Callable[..., Any]] = None,
    ) -> int:
        """
        Cancel this object's subscriptions matching every given filter.

        Returns the number of subscriptions cancelled.
        """
        cancelled = 0
        remaining = []
        for subscription in self._listening:
            matches = (
                (target is None or subscription.target is target)
                and (event_name is None or subscription.event_name == event_name)
                and (callback is None or subscription.callback == callback)
            )
            if matches and subscription.cancel():
                cancelled += 1
            elif subscription.active:
                remaining.append(subscription)
        self._listening[:] = remaining
        return cancelled

    def __repr__(self) -> str:
        fields = [f"{name}={getattr(self, name)!r}" for name in self.props()]
        return f"{type(self).__name__}({', '.join(fields)})"
