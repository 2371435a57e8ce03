"""Construction and configuration tests.

Invalid options must raise ConfigurationError before anything on the
parent is instrumented.
"""

from __future__ import annotations

import re

import pytest

from object_reflector import ConfigurationError, Record, Reflector, ReflectorConfig, ReflectorError


class TestInvalidConfiguration:
    """Each malformed configuration raises ConfigurationError."""

    def test_no_options(self):
        """Reflector() without any options fails."""
        with pytest.raises(ConfigurationError) as exc_info:
            Reflector()

        assert exc_info.value.field == "options"

    def test_empty_options(self):
        """Options without a parent fail."""
        with pytest.raises(ConfigurationError) as exc_info:
            Reflector({})

        assert exc_info.value.field == "parent"
        assert "got nothing" in str(exc_info.value)

    def test_none_parent(self):
        """parent=None fails."""
        with pytest.raises(ConfigurationError) as exc_info:
            Reflector({"parent": None})

        assert exc_info.value.field == "parent"
        assert "None" in str(exc_info.value)

    def test_scalar_parent(self):
        """Numbers and strings are not records."""
        for value in (42, "text", 1.5, (1, 2)):
            with pytest.raises(ConfigurationError) as exc_info:
                Reflector(parent=value)
            assert exc_info.value.field == "parent"

    def test_class_parent(self, make_node):
        """A class is not a record."""
        with pytest.raises(ConfigurationError):
            Reflector(parent=make_node)

    def test_plain_dict_parent(self):
        """Plain dicts cannot intercept writes; the error points to Record."""
        with pytest.raises(ConfigurationError) as exc_info:
            Reflector(parent={})

        assert "Record" in str(exc_info.value)

    def test_scalar_property_list(self, make_node):
        """properties=2 fails."""
        with pytest.raises(ConfigurationError) as exc_info:
            Reflector({"object": make_node(), "properties": 2})

        assert exc_info.value.field == "property_names"
        assert "Expected a sequence but got int" in str(exc_info.value)

    def test_string_property_list(self, make_node):
        """A bare string is a scalar, not a list of names."""
        with pytest.raises(ConfigurationError):
            Reflector(parent=make_node(), property_names="x")

    def test_set_property_list(self, make_node):
        """Unordered collections are rejected."""
        with pytest.raises(ConfigurationError):
            Reflector(parent=make_node(), property_names={"x"})

    def test_non_string_property_name(self, make_node):
        """Every name must be a string; the error names the index."""
        with pytest.raises(ConfigurationError) as exc_info:
            Reflector(parent=make_node(), property_names=["x", 1])

        assert "index 1" in str(exc_info.value)

    def test_non_mapping_options(self):
        """Options must be a mapping."""
        with pytest.raises(ConfigurationError) as exc_info:
            Reflector("parent")

        assert exc_info.value.field == "options"

    def test_explicit_none_property_list(self, make_node):
        """Only an omitted list is optional; None is not a sequence."""
        with pytest.raises(ConfigurationError) as exc_info:
            Reflector(parent=make_node(), properties=None)

        assert exc_info.value.field == "property_names"
        assert "NoneType" in str(exc_info.value)

    def test_bytes_property_name(self, make_node):
        """Names are not coerced from bytes."""
        with pytest.raises(ConfigurationError) as exc_info:
            Reflector(parent=make_node(), property_names=["x", b"y"])

        assert "index 1" in str(exc_info.value)

    def test_non_subclassable_parent(self):
        """Objects whose class cannot be subclassed are rejected up front."""
        with pytest.raises(ConfigurationError) as exc_info:
            Reflector(parent=re.compile("x"), property_names=["x"])

        assert exc_info.value.field == "parent"

    def test_configuration_error_is_reflector_error(self):
        """ConfigurationError can be caught as ReflectorError."""
        with pytest.raises(ReflectorError):
            Reflector()

    def test_validation_error_is_chained(self):
        """pydantic's ValidationError is kept as the cause."""
        from pydantic import ValidationError

        with pytest.raises(ConfigurationError) as exc_info:
            Reflector({})

        assert isinstance(exc_info.value.__cause__, ValidationError)

    def test_failed_construction_leaves_parent_untouched(self, make_node):
        """Validation runs before instrumentation."""
        parent = make_node(x=1)

        with pytest.raises(ConfigurationError):
            Reflector(parent=parent, property_names=["x", None])

        assert type(parent) is make_node
        assert parent.__dict__ == {"x": 1}


class TestValidConfiguration:
    """Accepted options and their aliases."""

    def test_empty_record_parent(self):
        """An empty Record is a valid parent."""
        reflector = Reflector({"parent": Record()})

        assert reflector.children == ()
        assert reflector.property_names == []

    def test_object_parent(self, make_node):
        """An empty attribute object is a valid parent."""
        parent = make_node()
        reflector = Reflector({"object": parent})

        assert reflector.parent is parent

    def test_parent_is_not_copied(self):
        """The parent is held by reference."""
        parent = Record(x=1)
        reflector = Reflector(parent=parent)

        assert reflector.parent is parent

    def test_property_aliases(self, make_node):
        """properties, propertyNames and property_names are equivalent."""
        for alias in ("properties", "propertyNames", "property_names"):
            reflector = Reflector({"parent": make_node(), alias: ["x"]})
            assert reflector.property_names == ["x"]

    def test_reflect_back_aliases(self, make_node):
        """All reflect-back spellings are accepted."""
        for alias in ("enableChildReflection", "enable_child_reflection", "reflectBack", "reflect_back"):
            reflector = Reflector({"parent": make_node(), alias: True})
            assert reflector.reflect_back is True

    def test_reflect_back_defaults_to_false(self, make_node):
        reflector = Reflector(parent=make_node())

        assert not reflector.reflect_back

    def test_reflect_back_stored_verbatim(self, make_node):
        """reflect_back is not coerced."""
        reflector = Reflector(parent=make_node(), reflect_back="yes")

        assert reflector.reflect_back == "yes"

    def test_kwargs_override_options(self, make_node):
        first, second = make_node(), make_node()
        reflector = Reflector({"parent": first}, parent=second)

        assert reflector.parent is second

    def test_duplicate_names_dropped(self, make_node):
        """Duplicates keep their first position."""
        reflector = Reflector(parent=make_node(), property_names=["x", "y", "x"])

        assert reflector.property_names == ["x", "y"]

    def test_tuple_property_list(self, make_node):
        reflector = Reflector(parent=make_node(), property_names=("x", "y"))

        assert reflector.property_names == ["x", "y"]

    def test_properties_linked_during_construction(self, make_node):
        """The parent is instrumented before the constructor returns."""
        parent = make_node(x=1)
        reflector = Reflector(parent=parent, property_names=["x"])

        assert type(parent) is not make_node
        assert reflector.linked_properties == ("x",)

    def test_config_model(self, make_node):
        """ReflectorConfig can be validated on its own."""
        parent = make_node()
        config = ReflectorConfig.model_validate({"object": parent, "properties": ["a"]})

        assert config.parent is parent
        assert config.property_names == ["a"]
        assert config.reflect_back is False


class TestLinkProperties:
    """link_properties() validation and return value."""

    def test_returns_self(self, make_node):
        reflector = Reflector(parent=make_node())

        assert reflector.link_properties(["x"]) is reflector

    def test_none_rejected(self, make_node):
        reflector = Reflector(parent=make_node())

        with pytest.raises(ConfigurationError):
            reflector.link_properties(None)

    def test_bytes_name_rejected(self, make_node):
        reflector = Reflector(parent=make_node())

        with pytest.raises(ConfigurationError):
            reflector.link_properties([b"x"])

        assert reflector.property_names == []

    def test_invalid_names_change_nothing(self, make_node):
        """A rejected list leaves the current links in place."""
        parent = make_node(x=1)
        reflector = Reflector(parent=parent, property_names=["x"])

        with pytest.raises(ConfigurationError) as exc_info:
            reflector.link_properties(3)

        assert exc_info.value.field == "property_names"
        assert reflector.property_names == ["x"]
        assert reflector.linked_properties == ("x",)

    def test_empty_list(self, make_node):
        """An empty list instruments nothing."""
        parent = make_node(x=1)
        Reflector(parent=parent, property_names=[])

        assert type(parent) is make_node

    def test_repr(self, make_node):
        reflector = Reflector(parent=make_node(), property_names=["x"])

        assert repr(reflector) == (
            "Reflector(parent=Node, property_names=['x'], children=0, reflect_back=False)"
        )
