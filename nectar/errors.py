"""
Nectar Errors
=============

Exception types raised (or logged) by the reactive-object layer.

Only `InvalidTarget` is raised during normal use. `ValidationRejected` and
`ValueAbsent` describe soft failures: plain attribute assignment and
`Maybe.value` log them and carry on, while `Observable.assign()` and
`Maybe.unwrap()` raise them for callers that want a hard failure.
"""

from typing import Any


class NectarError(Exception):
    """Base class for all nectar errors."""


class InvalidTarget(NectarError, ValueError):
    """
    Raised when `listen_to` / `listen_to_once` is given a target that is
    missing or cannot carry listeners.
    """

    def __init__(self, target: Any) -> None:
        self.target = target
        if target is None:
            reason = "target doesn't exist"
        else:
            reason = f"{type(target).__name__} is not an Observable"
        super().__init__(f"Cannot listen to {target!r}: {reason}")


class ValidationRejected(NectarError, ValueError):
    """Raised when a value fails the validation predicate of an observed attribute."""

    def __init__(self, name: str, value: Any) -> None:
        self.name = name
        self.value = value
        super().__init__(f"Invalid value {value!r} for '{name}'")


class ValueAbsent(NectarError, LookupError):
    """Raised when the value of an empty `Maybe` is required."""

    def __init__(self) -> None:
        super().__init__("Asked for value of Maybe without a value")
