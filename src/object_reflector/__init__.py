"""object-reflector - mirror a parent's properties onto child records.

Reflector(parent=..., property_names=[...]) instruments the named
properties of the parent. Every registered child sees the parent's
current value; with reflect_back=True, child writes travel upstream.

Records:
- Attribute objects: instances of ordinary Python classes (obj.x)
- Record: instrumentable mapping (record["x"])
- Plain dicts: children only, and only without reflect_back

Key behaviors:
- create_reflection(child): register + copy current values onto child
- parent write: stored on the parent, pushed to every child
- child write (reflect_back=True): stored on the parent, seen by siblings
- child write (reflect_back=False): local until the next parent write
- unreflect_child(child) / clear(): leave plain snapshot values behind

Example:
    from object_reflector import Reflector

    class Node:
        def __init__(self, **values):
            self.__dict__.update(values)

    root = Node(color="red")
    leaf = Node()

    reflector = Reflector(parent=root, property_names=["color"], reflect_back=True)
    reflector.create_reflection(leaf)

    root.color = "blue"   # leaf.color == "blue"
    leaf.color = "green"  # root.color == "green"

    reflector.clear()     # root and leaf keep "green" as plain attributes
"""

from .config import ReflectorConfig
from .errors import ConfigurationError, ReflectorError
from .record import Record
from .reflector import Reflector
from .types import MISSING, Accessor

__all__ = [
    "Reflector",
    "ReflectorConfig",
    "Record",
    "Accessor",
    "MISSING",
    "ReflectorError",
    "ConfigurationError",
]
