"""
Nectar Registry - Attribute Discovery and Accessor Wrapping
===========================================================

Observed attributes are declared per class (see `nectar.descriptors`), and the
`ObservableMeta` metaclass records each class's own declarations in
``_observed_names``. This module turns those declarations into notifying
accessors.

The *chain* of a class is its `Observable` subclasses in MRO order, most
derived first, excluding `Observable` itself. Each link is identified by its
*chain path*, the qualified names from the outermost ancestor down to the
link, joined with ``#``:

```python
class Shape(Observable): ...
class Polygon(Shape): ...
class Square(Polygon): ...

chain(Square)       # [Square, Polygon, Shape]
chain_path(Square)  # "Shape#Polygon#Square"
```

Wrapping a link replaces every declared `ObservedProperty` with a
`NotifyingProperty`. It must happen at most once per link: wrapping twice would
emit every change event twice. The process-wide `registry` remembers which
links were wrapped, and a link whose properties are already notifying is
skipped regardless of what the registry says.
"""

import logging
import threading
from typing import Dict, List, Union

from .descriptors import NotifyingProperty, ObservedProperty


def chain(cls: type) -> List[type]:
    """Observable classes of `cls`, most derived first, excluding the base."""
    return [link for link in cls.__mro__ if "_observed_names" in vars(link)]


def chain_path(cls: type) -> str:
    """Qualified path of a chain link, outermost ancestor first."""
    return "#".join(link.__qualname__ for link in reversed(chain(cls)))


def observed_names(cls: type) -> List[str]:
    """Observed attribute names across the whole chain of `cls`."""
    names: List[str] = []
    for link in chain(cls):
        for name in vars(link)["_observed_names"]:
            if name not in names:
                names.append(name)
    return names


def wrap_link(link: type) -> List[str]:
    """Upgrade the observed properties declared on `link` to notifying ones."""
    wrapped = []
    for name in vars(link)["_observed_names"]:
        declared = vars(link).get(name)
        if not isinstance(declared, ObservedProperty):
            continue
        if isinstance(declared, NotifyingProperty):
            continue
        setattr(link, name, NotifyingProperty.wrapping(declared))
        wrapped.append(name)
    return wrapped


class AttributeRegistry:
    """
    Process-wide record of the chain links whose accessors have been wrapped.

    Entries map a chain path to the class it was wrapped for, and accumulate
    for the life of the process. A different class registered under an
    existing path (a class redefined with the same qualified name) is wrapped
    in its own right and takes over the entry.
    """

    def __init__(self) -> None:
        self._wrapped: Dict[str, type] = {}
        self._lock = threading.Lock()

    def ensure_wrapped(self, cls: type) -> List[str]:
        """
        Wrap every not-yet-wrapped link in the chain of `cls`.

        Returns the chain paths wrapped by this call (empty when the whole
        chain was already wrapped).
        """
        links = chain(cls)
        if not links:
            return []

        # The whole chain is wrapped together, so a wrapped leaf means a wrapped chain
        if self._wrapped.get(vars(links[0])["_chain_path"]) is links[0]:
            return []

        done = []
        with self._lock:
            for link in links:
                path = vars(link)["_chain_path"]
                if self._wrapped.get(path) is link:
                    continue
                names = wrap_link(link)
                self._wrapped[path] = link
                done.append(path)
                logging.debug(f"Wrapped observed attributes of {path}: {names}")
        return done

    def is_wrapped(self, link: Union[type, str]) -> bool:
        if isinstance(link, str):
            return link in self._wrapped
        return self._wrapped.get(vars(link).get("_chain_path")) is link

    def paths(self) -> List[str]:
        return list(self._wrapped)

    def reset(self) -> None:
        """Forget all entries. Already-wrapped properties stay wrapped."""
        with self._lock:
            self._wrapped.clear()

    def __contains__(self, link: Union[type, str]) -> bool:
        return self.is_wrapped(link)

    def __len__(self) -> int:
        return len(self._wrapped)


registry = AttributeRegistry()
