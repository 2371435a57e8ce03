"""Reflector configuration.

Options are accepted as a mapping, as keyword arguments, or both:

    Reflector({"object": parent, "properties": ["x"]})
    Reflector(parent=parent, property_names=["x"], reflect_back=True)

Field aliases:
    parent:          parent, object
    property_names:  property_names, propertyNames, properties
    reflect_back:    reflect_back, reflectBack,
                     enable_child_reflection, enableChildReflection

Validation happens here, before any record is instrumented. pydantic
errors are translated into ConfigurationError.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Annotated, Any

from pydantic import (
    AfterValidator,
    AliasChoices,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StrictStr,
    TypeAdapter,
    ValidationError,
    field_validator,
)
from pydantic_core import ErrorDetails, PydanticCustomError

from .access import target_for
from .errors import ConfigurationError

PARENT_ALIASES = ("parent", "object")
PROPERTY_NAMES_ALIASES = ("property_names", "propertyNames", "properties")
REFLECT_BACK_ALIASES = (
    "reflect_back",
    "reflectBack",
    "enable_child_reflection",
    "enableChildReflection",
)

FIELD_BY_ALIAS = {
    **{alias: "parent" for alias in PARENT_ALIASES},
    **{alias: "property_names" for alias in PROPERTY_NAMES_ALIASES},
    **{alias: "reflect_back" for alias in REFLECT_BACK_ALIASES},
}


def ensure_sequence(value: Any) -> list[Any]:
    """Accept ordered sequences only. Strings count as scalars."""
    if isinstance(value, (str, bytes, bytearray)) or not isinstance(value, Sequence):
        raise PydanticCustomError(
            "property_names_type",
            "Invalid type for property definitions! Expected a sequence but got {type_name}",
            {"type_name": type(value).__name__},
        )
    return list(value)


def drop_duplicates(names: list[str]) -> list[str]:
    return list(dict.fromkeys(names))


PropertyNames = Annotated[
    list[StrictStr],
    BeforeValidator(ensure_sequence),
    AfterValidator(drop_duplicates),
]

property_names_adapter: TypeAdapter[list[str]] = TypeAdapter(PropertyNames)


class ReflectorConfig(BaseModel):
    """Validated Reflector options.

    parent is passed through by reference, never copied.
    reflect_back is stored verbatim and evaluated by truthiness.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    parent: Any = Field(validation_alias=AliasChoices(*PARENT_ALIASES))
    # Only an omitted list defaults to None; an explicit None is rejected.
    property_names: PropertyNames = Field(
        default=None, validation_alias=AliasChoices(*PROPERTY_NAMES_ALIASES)
    )
    reflect_back: Any = Field(
        default=False, validation_alias=AliasChoices(*REFLECT_BACK_ALIASES)
    )

    @field_validator("parent")
    @classmethod
    def check_parent(cls, value: Any) -> Any:
        if value is None:
            raise PydanticCustomError(
                "parent_none",
                "Invalid type for parent definition! Expected a record but got None",
            )
        target = target_for(value)
        if target is None or not target.instrumentable:
            hint = " (wrap mappings in object_reflector.Record)" if isinstance(value, Mapping) else ""
            raise PydanticCustomError(
                "parent_type",
                "Invalid type for parent definition! Expected a record but got {type_name}{hint}",
                {"type_name": type(value).__name__, "hint": hint},
            )
        return value


def describe(error: ErrorDetails) -> tuple[str, str]:
    """Return (field, message) for one pydantic error."""
    loc = error["loc"]
    field = FIELD_BY_ALIAS.get(str(loc[0]), str(loc[0])) if loc else "options"
    if error["type"] == "missing" and field == "parent":
        return field, "Expected target parent but got nothing"
    index = [part for part in loc[1:] if isinstance(part, int)]
    if field == "property_names" and index:
        return field, f"Invalid property definition at index {index[0]}: {error['msg']}"
    return field, error["msg"]


def load_config(options: Mapping[str, Any] | None = None, /, **kwargs: Any) -> ReflectorConfig:
    """Merge options and kwargs (kwargs win) and validate them."""
    if options is None and not kwargs:
        raise ConfigurationError("Expected reflector options but got nothing", field="options")
    if options is not None and not isinstance(options, Mapping):
        raise ConfigurationError(
            f"Invalid type for reflector options! Expected a mapping but got {type(options).__name__}",
            field="options",
        )
    data = {**(options or {}), **kwargs}
    try:
        return ReflectorConfig.model_validate(data)
    except ValidationError as e:
        field, message = describe(e.errors()[0])
        raise ConfigurationError(message, field=field) from e


def validate_property_names(names: Any) -> list[str]:
    """Validate a property-name sequence for link_properties()."""
    try:
        return property_names_adapter.validate_python(names)
    except ValidationError as e:
        error = e.errors()[0]
        index = [part for part in error["loc"] if isinstance(part, int)]
        message = error["msg"]
        if index:
            message = f"Invalid property definition at index {index[0]}: {message}"
        raise ConfigurationError(message, field="property_names") from e
