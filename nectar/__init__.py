"""
Nectar - Reactive Objects for Plain Python Classes

A small reactive-object mixin: subclass `Observable`, declare observed
attributes with `prop()` or `@observed`, and every assignment emits change
events that other objects can subscribe to with `listen_to`,
`listen_to_once` or guarded subscriptions. `Maybe` is a small optional-value
container that tracks presence explicitly.
"""

from .descriptors import NotifyingProperty, ObservedProperty, observed, prop
from .errors import InvalidTarget, NectarError, ValidationRejected, ValueAbsent
from .events import (
    CHANGE_EVENT,
    EVENT_SEPARATOR,
    GUARD_SEPARATOR,
    EventDispatcher,
    Subscription,
    change_event,
)
from .maybe import MISSING, Maybe
from .observable import Observable, ObservableMeta
from .registry import AttributeRegistry, registry
from .snapshot import Snapshot

__version__ = "0.1.0"

__all__ = [
    # Observable objects
    "Observable",
    "ObservableMeta",
    "Snapshot",
    # Attribute declarations
    "prop",
    "observed",
    "ObservedProperty",
    "NotifyingProperty",
    # Events
    "EventDispatcher",
    "Subscription",
    "change_event",
    "CHANGE_EVENT",
    "EVENT_SEPARATOR",
    "GUARD_SEPARATOR",
    # Registry
    "AttributeRegistry",
    "registry",
    # Optional values
    "Maybe",
    "MISSING",
    # Exceptions
    "NectarError",
    "InvalidTarget",
    "ValidationRejected",
    "ValueAbsent",
]
