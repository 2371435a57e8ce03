"""object-reflector Quickstart - one-way mirroring."""

from object_reflector import Reflector


class Widget:
    def __init__(self, **values):
        self.__dict__.update(values)


theme = Widget(color="red", font="serif")
button = Widget()
label = Widget(color="black")

reflector = Reflector(parent=theme, property_names=["color", "font"])
reflector.create_reflection(button)
reflector.create_reflection(label)
assert button.color == label.color == "red"

# Parent writes reach every child
theme.color = "blue"
assert button.color == label.color == "blue"

# Child writes stay local until the next parent write
label.color = "green"
assert theme.color == "blue"
theme.color = "white"
assert label.color == "white"

reflector.clear()
