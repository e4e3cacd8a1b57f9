"""
Nectar Snapshot - Point-in-time view of an observable's attributes.
"""

from typing import Any, Dict, Iterator, List


class Snapshot:
    """
    Immutable snapshot of observed attribute values at a specific point in time.
    """

    __slots__ = ("_source_type", "_attrs", "_values")

    def __init__(self, source: Any) -> None:
        attrs: List[str] = source.props()
        object.__setattr__(self, "_source_type", type(source))
        object.__setattr__(self, "_attrs", attrs)
        object.__setattr__(
            self, "_values", {name: getattr(source, name) for name in attrs}
        )

    def __getattr__(self, name: str) -> Any:
        values = object.__getattribute__(self, "_values")
        if name in values:
            return values[name]
        raise AttributeError(
            f"{self._source_type.__name__} snapshot has no attribute '{name}'"
        )

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Snapshot is immutable")

    def __getitem__(self, name: str) -> Any:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._attrs)

    def __len__(self) -> int:
        return len(self._attrs)

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Snapshot):
            return self._values == other._values
        if isinstance(other, dict):
            return self._values == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        fields = [f"{name}={self._values[name]!r}" for name in self._attrs]
        return f"Snapshot({', '.join(fields)})"
