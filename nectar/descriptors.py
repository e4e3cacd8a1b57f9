"""
Nectar Descriptors - Observed Attribute Declarations
====================================================

This module provides the descriptors used to declare *observed attributes* on
`Observable` subclasses. An observed attribute is a property with both a getter
and a setter; once the owning class has been prepared (on first construction),
every assignment to it emits change events on the instance that was assigned to.

Declaring Observed Attributes
-----------------------------

**Stored attributes** are the common case. `prop()` creates a property backed
by an instance slot named after the attribute (``_<name>``):

```python
from nectar import Observable, prop

class Point(Observable):
    x = prop(0)
    y = prop(0)
```

**Computed or custom attributes** use ordinary properties marked with
`@observed`. Apply the marker to the last definition so that it sees the
setter:

```python
class Temperature(Observable):
    @property
    def celsius(self):
        return self._celsius

    @observed
    @celsius.setter
    def celsius(self, value):
        self._celsius = value
```

`@observed` also works directly on the getter, since `ObservedProperty.setter`
keeps the marker:

```python
    @observed
    def kelvin(self):
        return self._celsius + 273.15

    @kelvin.setter
    def kelvin(self, value):
        self._celsius = value - 273.15
```

Validation
----------

Both forms accept a predicate. A value the predicate rejects is not stored:
plain assignment logs the rejection and keeps the previous value, while
`Observable.assign()` raises `ValidationRejected`.

```python
class Account(Observable):
    balance = prop(0, validate=lambda v: v >= 0)
```

Getter-only properties are never observed, even when marked.
"""

import logging
from typing import Any, Callable, Optional, Union

from .errors import ValidationRejected

Validator = Callable[[Any], bool]


class ObservedProperty(property):
    """
    Property marked as an observed attribute.

    Carries the attribute name (filled in by `__set_name__`) and an optional
    validation predicate. On its own it behaves like a validated property;
    the notifying behaviour is added by `NotifyingProperty` when the owning
    class is wrapped.
    """

    def __init__(
        self,
        fget: Optional[Callable[[Any], Any]] = None,
        fset: Optional[Callable[[Any, Any], None]] = None,
        fdel: Optional[Callable[[Any], None]] = None,
        doc: Optional[str] = None,
        *,
        validate: Optional[Validator] = None,
    ) -> None:
        super().__init__(fget, fset, fdel, doc)
        self.validate = validate
        self.name: Optional[str] = getattr(fget, "__name__", None)

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    @property
    def is_observed(self) -> bool:
        """True when the property has both a getter and a setter."""
        return self.fget is not None and self.fset is not None

    def assign(self, instance: Any, value: Any) -> None:
        """Validate and store `value`, raising `ValidationRejected` on failure."""
        if self.fset is None:
            raise AttributeError(f"can't set attribute '{self.name}'")
        if self.validate is not None and not self.validate(value):
            raise ValidationRejected(self.name, value)
        self.fset(instance, value)

    def __set__(self, instance: Any, value: Any) -> None:
        try:
            self.assign(instance, value)
        except ValidationRejected as e:
            logging.error(f"{e}; keeping previous value")

    # property.getter/setter/deleter rebuild with type(self)(fget, fset, fdel, doc),
    # which would drop the validator and the name
    def getter(self, fget: Callable[[Any], Any]) -> "ObservedProperty":
        return self._replace(fget=fget)

    def setter(self, fset: Callable[[Any, Any], None]) -> "ObservedProperty":
        return self._replace(fset=fset)

    def deleter(self, fdel: Callable[[Any], None]) -> "ObservedProperty":
        return self._replace(fdel=fdel)

    def _replace(self, **changes: Any) -> "ObservedProperty":
        accessors = {
            "fget": self.fget,
            "fset": self.fset,
            "fdel": self.fdel,
            "doc": self.__doc__,
        }
        accessors.update(changes)
        clone = ObservedProperty(**accessors, validate=self.validate)
        clone.name = self.name
        return clone

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"


class StoredProperty(ObservedProperty):
    """Observed attribute stored on the instance under ``_<name>``."""

    def __init__(
        self,
        default: Any = None,
        *,
        validate: Optional[Validator] = None,
        doc: Optional[str] = None,
    ) -> None:
        super().__init__(self._read, self._write, None, doc, validate=validate)
        self.default = default
        self.slot: Optional[str] = None

    def __set_name__(self, owner: type, name: str) -> None:
        super().__set_name__(owner, name)
        self.slot = f"_{name}"

    def _read(self, instance: Any) -> Any:
        return getattr(instance, self.slot, self.default)

    def _write(self, instance: Any, value: Any) -> None:
        setattr(instance, self.slot, value)


class NotifyingProperty(ObservedProperty):
    """
    Observed property whose setter emits change events.

    Built from a declared `ObservedProperty` by the accessor wrapper. Reading
    and deleting go straight to the declared accessors; a successful write is
    followed by the ``change`` events on the assigned instance.
    """

    @classmethod
    def wrapping(cls, declared: ObservedProperty) -> "NotifyingProperty":
        wrapper = cls(
            declared.fget,
            declared.fset,
            declared.fdel,
            declared.__doc__,
            validate=declared.validate,
        )
        wrapper.name = declared.name
        wrapper.__wrapped__ = declared
        return wrapper

    def assign(self, instance: Any, value: Any) -> None:
        super().assign(instance, value)
        instance._notify_change(self.name, value)

    def _replace(self, **changes: Any) -> "ObservedProperty":
        # A subclass redefining an accessor declares a fresh, unwrapped property
        return self.__wrapped__._replace(**changes)


def prop(
    default: Any = None,
    *,
    validate: Optional[Validator] = None,
    doc: Optional[str] = None,
) -> Any:
    """
    Declare a stored observed attribute.

    Args:
        default: Value returned until the attribute is first assigned. It is
            shared between instances, so prefer immutable defaults.
        validate: Optional predicate; assignments it rejects are ignored.
        doc: Optional docstring for the attribute.
    """
    return StoredProperty(default, validate=validate, doc=doc)


def observed(
    target: Union[property, Callable[[Any], Any], None] = None,
    *,
    validate: Optional[Validator] = None,
) -> Any:
    """
    Mark a property (or a getter function) as an observed attribute.

    Usable bare (``@observed``) or with a validator
    (``@observed(validate=lambda v: v > 0)``).
    """

    def mark(target: Union[property, Callable[[Any], Any]]) -> ObservedProperty:
        if isinstance(target, property):
            return ObservedProperty(
                target.fget,
                target.fset,
                target.fdel,
                target.__doc__,
                validate=validate,
            )
        if callable(target):
            return ObservedProperty(target, validate=validate)
        raise TypeError(
            f"@observed expects a property or a getter, got {type(target).__name__}"
        )

    if target is None:
        return mark
    return mark(target)


def declared_names(namespace: dict) -> tuple:
    """Names of the observed attributes declared in a class body, in order."""
    return tuple(
        name
        for name, value in namespace.items()
        if isinstance(value, ObservedProperty) and value.is_observed
    )
