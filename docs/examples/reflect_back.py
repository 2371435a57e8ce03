"""object-reflector - two-way mirroring with reflect_back=True."""

from object_reflector import Record, Reflector

settings = Record(volume=5)
left, right = Record(), Record()

with Reflector(parent=settings, property_names=["volume"], reflect_back=True) as reflector:
    reflector.create_reflection(left)
    reflector.create_reflection(right)

    # A child write updates the parent and, through it, every sibling
    left["volume"] = 8
    assert settings["volume"] == right["volume"] == 8

# Leaving the block clears the reflector; values stay as plain entries
right["volume"] = 1
assert settings["volume"] == left["volume"] == 8
