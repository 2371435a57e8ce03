"""Record access - read, write and instrument caller-owned records.

Design:
    The Reflector never touches a record directly. target_for(obj) wraps
    it in a Target that knows how to read, write and install accessors
    for that kind of record:

    - RecordTarget: object_reflector.Record (instrumentable)
    - AttributeTarget: instances of ordinary Python classes. Instrumented
      by moving the instance onto a per-instance subclass that carries a
      ReflectedAttribute descriptor for every mirrored name. The original
      class is restored when the last descriptor is removed.
    - MappingTarget: any other MutableMapping (not instrumentable)

    Objects of builtin classes without a __dict__ (numbers, strings,
    tuples, None) and classes themselves are not records.

Reading a name that has no value returns MISSING instead of raising.
Writing MISSING removes the plain value.
"""

from __future__ import annotations

import types
from collections.abc import MutableMapping
from typing import Any

from .record import Record
from .types import MISSING, Accessor

# Instances may move onto a subclass only when their class is a heap type
# (created by a class statement) that can be subclassed and is not immutable.
IMMUTABLETYPE_FLAG = 1 << 8
HEAPTYPE_FLAG = 1 << 9
BASETYPE_FLAG = 1 << 10


class ReflectedAttribute:
    """Data descriptor redirecting one attribute through an Accessor."""

    def __init__(self, name: str, accessor: Accessor):
        self.name = name
        self.accessor = accessor

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        value = self.accessor.get()
        if value is MISSING:
            raise AttributeError(
                f"'{type(instance).__name__}' object has no attribute '{self.name}'"
            )
        return value

    def __set__(self, instance: Any, value: Any) -> None:
        self.accessor.set(value)

    def __delete__(self, instance: Any) -> None:
        raise AttributeError(f"cannot delete mirrored attribute '{self.name}'")


class Target:
    """Uniform access to one record."""

    instrumentable = False

    def __init__(self, obj: Any):
        self.obj = obj

    def read(self, name: str) -> Any:
        raise NotImplementedError

    def write(self, name: str, value: Any) -> None:
        raise NotImplementedError

    def install(self, name: str, accessor: Accessor) -> None:
        raise TypeError(f"{type(self.obj).__name__} records cannot be instrumented")

    def remove(self, name: str) -> bool:
        """Remove the accessor on name. Returns False if none was installed."""
        return False

    def uninstall(self, name: str) -> None:
        """Remove the accessor on name, keeping its last value as a plain value."""
        backup = self.read(name)
        if self.remove(name):
            self.write(name, backup)


class MappingTarget(Target):
    def read(self, name: str) -> Any:
        try:
            return self.obj[name]
        except KeyError:
            return MISSING

    def write(self, name: str, value: Any) -> None:
        if value is MISSING:
            self.obj.pop(name, None)
        else:
            self.obj[name] = value


class RecordTarget(MappingTarget):
    instrumentable = True

    def write(self, name: str, value: Any) -> None:
        if value is MISSING:
            # Mirrored keys refuse deletion; an unset value stays unset.
            if not self.obj.is_attached(name):
                self.obj.data.pop(name, None)
        else:
            self.obj[name] = value

    def install(self, name: str, accessor: Accessor) -> None:
        self.obj.attach(name, accessor)

    def remove(self, name: str) -> bool:
        return self.obj.detach(name) is not None


class AttributeTarget(Target):
    def __init__(self, obj: Any, instrumentable: bool):
        super().__init__(obj)
        self.instrumentable = instrumentable

    def read(self, name: str) -> Any:
        return getattr(self.obj, name, MISSING)

    def write(self, name: str, value: Any) -> None:
        if value is not MISSING:
            setattr(self.obj, name, value)
            return
        instance_dict = getattr(self.obj, "__dict__", None)
        if instance_dict is not None:
            instance_dict.pop(name, None)

    def install(self, name: str, accessor: Accessor) -> None:
        if not self.instrumentable:
            raise TypeError(f"{type(self.obj).__name__} objects cannot be instrumented")
        cls = reflected_class(self.obj)
        instance_dict = getattr(self.obj, "__dict__", None)
        if instance_dict is not None:
            instance_dict.pop(name, None)
        setattr(cls, name, ReflectedAttribute(name, accessor))

    def remove(self, name: str) -> bool:
        cls = type(self.obj)
        if "__reflected_base__" not in cls.__dict__:
            return False
        if not isinstance(cls.__dict__.get(name), ReflectedAttribute):
            return False
        delattr(cls, name)
        if not any(isinstance(v, ReflectedAttribute) for v in cls.__dict__.values()):
            self.obj.__class__ = cls.__reflected_base__
        return True


def reflected_class(obj: Any) -> type:
    """Return obj's per-instance subclass, creating and assigning it if needed."""
    cls = type(obj)
    if "__reflected_base__" in cls.__dict__:
        return cls

    def exec_body(ns: dict[str, Any]) -> None:
        ns["__slots__"] = ()
        ns["__module__"] = cls.__module__
        ns["__qualname__"] = cls.__qualname__
        ns["__reflected_base__"] = cls

    subclass = types.new_class(cls.__name__, (cls,), exec_body=exec_body)
    obj.__class__ = subclass
    return subclass


def supports_class_assignment(obj: Any) -> bool:
    flags = type(obj).__flags__
    return (
        bool(flags & HEAPTYPE_FLAG)
        and bool(flags & BASETYPE_FLAG)
        and not flags & IMMUTABLETYPE_FLAG
    )


def target_for(obj: Any) -> Target | None:
    """Wrap obj in the matching Target, or return None if obj is not a record."""
    if isinstance(obj, Record):
        return RecordTarget(obj)
    if isinstance(obj, MutableMapping):
        return MappingTarget(obj)
    if obj is None or isinstance(obj, (type, types.ModuleType)):
        return None
    if supports_class_assignment(obj):
        return AttributeTarget(obj, instrumentable=True)
    if hasattr(obj, "__dict__"):
        return AttributeTarget(obj, instrumentable=False)
    return None
