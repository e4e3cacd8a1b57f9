"""
Nectar Maybe - Optional Value Container
=======================================

`Maybe` wraps a value that may be absent and tracks presence explicitly.
Absence is marked with the `MISSING` sentinel rather than `None`, so `None`
itself is a perfectly good value:

```python
from nectar import Maybe

name = Maybe()
name.has_value   # False
name.value       # logs "Asked for value of Maybe without a value", returns None

name.value = None
name.has_value   # True
```

Reading an empty container never raises; use `get()` for a silent default or
`unwrap()` to get a `ValueAbsent` exception instead.
"""

import logging
from typing import Any, Generic, Optional, TypeVar, Union

from .errors import ValueAbsent

T = TypeVar("T")


class _Missing:
    """Sentinel for 'no value' in a Maybe."""

    def __repr__(self):
        return "MISSING"

    def __bool__(self):
        return False


MISSING: Any = _Missing()


class Maybe(Generic[T]):
    """
    Container for a value that may not be there.

    `has_value` is derived from the last assignment: assigning `MISSING`
    clears it, anything else sets it.
    """

    def __init__(self, value: Union[T, _Missing] = MISSING) -> None:
        self.has_value = False
        self._value: Union[T, _Missing] = MISSING
        self.value = value

    @property
    def value(self) -> Optional[T]:
        if self.has_value:
            return self._value

        logging.error(str(ValueAbsent()))
        return None

    @value.setter
    def value(self, value: Union[T, _Missing]) -> None:
        self._value = value
        self.has_value = value is not MISSING

    def get(self, default: Optional[T] = None) -> Optional[T]:
        """Return the value, or `default` if there is none."""
        return self._value if self.has_value else default

    def unwrap(self) -> T:
        """Return the value, raising `ValueAbsent` if there is none."""
        if not self.has_value:
            raise ValueAbsent()
        return self._value

    def __bool__(self) -> bool:
        return self.has_value

    def __repr__(self) -> str:
        if self.has_value:
            return f"Maybe({self._value!r})"
        return "Maybe()"
