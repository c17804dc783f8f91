"""Registry of resource classes keyed by the API's ``object`` tag."""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Type, TypeVar

if TYPE_CHECKING:
    from .tap_object import TapObject

T = TypeVar("T", bound="Type[TapObject]")

_OBJECT_CLASSES: dict[str, "Type[TapObject]"] = {}


def register_object_type(cls: T) -> T:
    """Class decorator mapping ``cls.OBJECT_NAME`` to ``cls``."""
    name = getattr(cls, "OBJECT_NAME", None)
    if not name:
        raise ValueError(f"{cls.__name__} does not define OBJECT_NAME")
    _OBJECT_CLASSES[name] = cls
    return cls


def object_class_for(
    tag: object,
    default: Optional["Type[TapObject]"] = None,
) -> Optional["Type[TapObject]"]:
    """Return the class registered for ``tag``, or ``default`` when unknown."""
    if not isinstance(tag, str):
        return default
    return _OBJECT_CLASSES.get(tag, default)


def object_names_to_classes() -> dict[str, "Type[TapObject]"]:
    return dict(_OBJECT_CLASSES)


__all__ = [
    "object_class_for",
    "object_names_to_classes",
    "register_object_type",
]
