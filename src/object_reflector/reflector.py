"""Reflector - mirror a parent record's properties onto child records.

Design:
    The parent's mirrored names are redirected through accessors:
        read  -> shadow[name]
        write -> update_linked_children(name, value)

    shadow is owned by the Reflector; nothing is stored on the parent
    besides the accessors themselves.

    Children receive plain assignments at registration and on every
    parent write. With reflect_back enabled they also receive accessors:
        read  -> parent's current value (live)
        write -> shadow[name] (no fan-out; siblings read through the parent)

Threading:
    Not thread-safe. Every operation runs to completion in the caller's
    call stack; concurrent writers must synchronize externally.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .access import Target, target_for
from .config import load_config, validate_property_names
from .errors import ConfigurationError
from .types import MISSING, Accessor

logger = logging.getLogger(__name__)


class Reflector:
    """Synchronizes a set of named properties from one parent to many children.

    Example:
        parent = Settings(theme="dark")
        reflector = Reflector(parent=parent, property_names=["theme"])

        reflector.create_reflection(panel)
        assert panel.theme == "dark"

        parent.theme = "light"
        assert panel.theme == "light"

    With reflect_back=True a child write travels upstream:

        reflector = Reflector(parent=parent, property_names=["theme"], reflect_back=True)
        reflector.create_reflection(panel)
        reflector.create_reflection(sidebar)
        panel.theme = "solarized"
        assert parent.theme == sidebar.theme == "solarized"
    """

    def __init__(self, options: Mapping[str, Any] | None = None, /, **kwargs: Any):
        config = load_config(options, **kwargs)
        self.parent = config.parent
        self.parent_target: Target = target_for(self.parent)
        self.reflect_back = config.reflect_back
        self.property_names: list[str] = []
        self.shadow: dict[str, Any] = {}
        self.targets: list[Target] = []
        if config.property_names is not None:
            self.link_properties(config.property_names)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(parent={type(self.parent).__name__}, "
            f"property_names={self.property_names!r}, children={len(self.targets)}, "
            f"reflect_back={self.reflect_back!r})"
        )

    def __enter__(self) -> Reflector:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.clear()

    def __contains__(self, child: Any) -> bool:
        return self.is_child_registered(child)

    @property
    def children(self) -> tuple[Any, ...]:
        """Registered children in registration order."""
        return tuple(target.obj for target in self.targets)

    @property
    def linked_properties(self) -> tuple[str, ...]:
        """Names currently instrumented on the parent."""
        return tuple(self.shadow)

    def link_properties(self, names: Any) -> Reflector:
        """Mirror names from the parent, replacing the previous set.

        Names already linked keep their current value. Names no longer
        listed are unlinked and left as plain values.

        Raises:
            ConfigurationError: names is not a sequence of strings.
        """
        names = validate_property_names(names)
        dropped = [name for name in self.property_names if name not in names]
        self.property_names = names
        for name in dropped:
            if name in self.shadow:
                self.unlink_property(name)
        for name in names:
            if name not in self.shadow:
                self.link_property(name)
        logger.debug("Linked properties %s on %s", names, type(self.parent).__name__)
        return self

    def link_property(self, name: str) -> None:
        # Canonical initial value: whatever the parent holds at link time.
        self.shadow[name] = self.parent_target.read(name)
        self.parent_target.install(
            name,
            Accessor(
                get=lambda: self.shadow.get(name, MISSING),
                set=lambda value: self.update_linked_children(name, value),
            ),
        )
        for target in self.targets:
            target.write(name, self.shadow[name])
            if self.reflect_back:
                target.install(name, self.child_accessor(name))

    def unlink_property(self, name: str) -> None:
        if self.reflect_back:
            for target in self.targets:
                target.uninstall(name)
        self.parent_target.uninstall(name)
        del self.shadow[name]
        logger.debug("Unlinked property %r", name)

    def create_reflection(self, child: Any) -> None:
        """Register child and synchronize it with the parent.

        Registering an already registered child (by identity) does nothing.

        Raises:
            ConfigurationError: child is not a record, or reflect_back is
                enabled and child cannot be instrumented (e.g. a plain dict).
        """
        if child is self.parent:
            logger.warning("Ignoring attempt to reflect %r onto itself", type(child).__name__)
            return
        if self.is_child_registered(child):
            return
        target = target_for(child)
        if target is None:
            raise ConfigurationError(
                f"Invalid type for child! Expected a record but got {type(child).__name__}",
                field="child",
            )
        if self.reflect_back and not target.instrumentable:
            raise ConfigurationError(
                f"Cannot reflect back through {type(child).__name__} children"
                " (wrap mappings in object_reflector.Record)",
                field="child",
            )
        # A cleared reflector re-links its names on the next registration.
        for name in self.property_names:
            if name not in self.shadow:
                self.link_property(name)
        try:
            self.synchronize_child_state(target)
            if self.reflect_back:
                self.create_child_reflection(target)
        except Exception:
            if self.reflect_back:
                for name in self.property_names:
                    target.uninstall(name)
            raise
        self.targets.append(target)
        logger.debug("Registered child %s (%d total)", type(child).__name__, len(self.targets))

    def synchronize_child_state(self, target: Target) -> None:
        for name in self.property_names:
            target.write(name, self.parent_target.read(name))

    def create_child_reflection(self, target: Target) -> None:
        for name in self.property_names:
            target.install(name, self.child_accessor(name))

    def child_accessor(self, name: str) -> Accessor:
        return Accessor(
            get=lambda: self.parent_target.read(name),
            set=lambda value: self.store(name, value),
        )

    def store(self, name: str, value: Any) -> None:
        """Write a child-originated value to the parent without fan-out."""
        self.shadow[name] = value

    def update_linked_children(self, name: str, value: Any) -> Any:
        """Store value as the parent's value of name and push it to every child."""
        self.shadow[name] = value
        for target in list(self.targets):
            target.write(name, value)
        return value

    def unreflect_child(self, child: Any) -> None:
        """Unregister child, leaving its mirrored properties as plain values.

        Unknown children are ignored.
        """
        index = self.child_index(child)
        if index < 0:
            return
        target = self.targets[index]
        if self.reflect_back:
            for name in self.property_names:
                target.uninstall(name)
        del self.targets[index]
        logger.debug("Unregistered child %s (%d left)", type(child).__name__, len(self.targets))

    def clear(self) -> None:
        """Unregister every child and restore the parent's plain properties.

        The instance can be reused afterwards via link_properties() and
        create_reflection().
        """
        if self.reflect_back:
            for target in list(self.targets):
                self.unreflect_child(target.obj)
        for name in list(self.shadow):
            self.parent_target.uninstall(name)
        self.shadow.clear()
        self.targets = []
        logger.debug("Cleared reflector on %s", type(self.parent).__name__)

    def is_child_registered(self, child: Any) -> bool:
        return self.child_index(child) > -1

    def child_index(self, child: Any) -> int:
        for index, target in enumerate(self.targets):
            if target.obj is child:
                return index
        return -1
