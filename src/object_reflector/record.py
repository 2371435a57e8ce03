"""Record - mapping-style record that supports accessor installation."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, MutableMapping
from typing import Any

from .types import MISSING, Accessor


class Record(MutableMapping[str, Any]):
    """Mutable mapping whose keys can be redirected through accessors.

    Plain dicts cannot intercept item assignment, so a mapping that acts
    as a reflector parent (or as a child with reflect-back enabled) must
    be a Record.

    Two-layer structure:
        - data: plain key/value storage
        - accessors: keys currently redirected through an Accessor

    A key present in accessors is never present in data.

    Example:
        settings = Record(theme="dark")
        reflector = Reflector(parent=settings, property_names=["theme"])
        settings["theme"] = "light"  # fans out to every child
    """

    def __init__(self, data: Mapping[str, Any] | None = None, /, **kwargs: Any):
        self.data: dict[str, Any] = {}
        self.accessors: dict[str, Accessor] = {}
        if data is not None:
            self.update(data)
        if kwargs:
            self.update(kwargs)

    def __getitem__(self, key: str) -> Any:
        accessor = self.accessors.get(key)
        if accessor is None:
            return self.data[key]
        value = accessor.get()
        if value is MISSING:
            raise KeyError(key)
        return value

    def __setitem__(self, key: str, value: Any) -> None:
        accessor = self.accessors.get(key)
        if accessor is None:
            self.data[key] = value
        else:
            accessor.set(value)

    def __delitem__(self, key: str) -> None:
        if key in self.accessors:
            raise KeyError(f"cannot delete mirrored key {key!r}")
        del self.data[key]

    def __iter__(self) -> Iterator[str]:
        yield from self.data
        for key, accessor in self.accessors.items():
            if accessor.get() is not MISSING:
                yield key

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self)!r})"

    def attach(self, key: str, accessor: Accessor) -> None:
        """Redirect key through accessor, dropping any plain value."""
        self.data.pop(key, None)
        self.accessors[key] = accessor

    def detach(self, key: str) -> Accessor | None:
        """Stop redirecting key. Does not restore a plain value."""
        return self.accessors.pop(key, None)

    def is_attached(self, key: str) -> bool:
        return key in self.accessors
