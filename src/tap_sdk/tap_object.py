"""
Dynamic resource model for the Tap SDK.

A ``TapObject`` wraps one decoded JSON object.  Attributes are read and
written either as Python attributes (``charge.amount``) or as items
(``charge["amount"]``).  The object remembers which attributes were changed
locally since the last time it was synced with the API and, from a snapshot
of the last server payload, computes the minimal body for an update request.

Example:
    ```python
    charge = Charge.construct_from({"id": "chg_1", "amount": 10, "metadata": {"a": "1"}})
    charge.amount = 12
    charge.metadata.a = "2"

    charge.serialize_params()
    # {"amount": 12, "metadata": {"a": "2"}}
    ```
"""
from __future__ import annotations

import json
from typing import Any, ClassVar, Iterator, Mapping, Optional, Union

from . import util
from .object_types import object_class_for


def convert_to_tap_object(data: Any, opts: Union[str, Mapping[str, Any], None] = None) -> Any:
    """Materialize decoded JSON into resource objects.

    Mappings become instances of the class registered for their ``object``
    tag (a plain ``TapObject`` when the tag is missing or unknown); lists are
    converted item by item; everything else is returned unchanged.
    """
    if isinstance(data, (list, tuple)):
        return [convert_to_tap_object(item, opts) for item in data]
    if isinstance(data, Mapping):
        cls = object_class_for(data.get("object"), TapObject)
        return cls.construct_from(data, opts)
    return data


def _freeze(value: Any) -> Any:
    if isinstance(value, TapObject):
        return _freeze(value._values)
    if isinstance(value, Mapping):
        return frozenset((k, _freeze(v)) for k, v in value.items())
    if isinstance(value, list):
        return tuple(_freeze(v) for v in value)
    return value


class TapObject:
    """A schema-less API object with change tracking.

    Item access (``obj["key"]``) and ``get()`` always reach the payload.
    Attribute access is a shortcut that only works for keys not shadowed by
    a method or property of the class: ``obj.items`` is the ``items()``
    method, so a payload key named ``items`` is read as ``obj["items"]``.

    Attributes:
        OBJECT_NAME: Type tag this class is registered under, if any
        permanent_attributes: Attributes that can never be assigned locally
        protected_fields: Per-class attributes that are read-only
        additive_object_params: Nested map attributes whose updates are sent
            as a merge over the previous keys (e.g. ``metadata``)
    """

    OBJECT_NAME: ClassVar[Optional[str]] = None

    permanent_attributes: ClassVar[frozenset[str]] = frozenset({"id"})
    protected_fields: ClassVar[frozenset[str]] = frozenset()
    additive_object_params: ClassVar[frozenset[str]] = frozenset()

    def __init__(self, id: Any = None, opts: Union[str, Mapping[str, Any], None] = None) -> None:
        id, retrieve_params = util.normalize_id(id)
        self._retrieve_params = retrieve_params
        self._opts = util.normalize_opts(opts)
        self._original_values: dict[str, Any] = {}
        self._values: dict[str, Any] = {}
        self._unsaved_values: set[str] = set()
        self._transient_values: set[str] = set()
        if id:
            self._values["id"] = id

    @classmethod
    def construct_from(
        cls,
        values: Mapping[str, Any],
        opts: Union[str, Mapping[str, Any], None] = None,
    ) -> "TapObject":
        """Build an object from a decoded API payload."""
        return cls(values.get("id")).refresh_from(values, opts)

    # Attribute access

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._values[name]
        except KeyError:
            raise AttributeError(self._missing_message(name)) from None

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_") or isinstance(getattr(type(self), name, None), property):
            object.__setattr__(self, name, value)
        else:
            self.set(name, value)

    def __getitem__(self, key: str) -> Any:
        try:
            return self._values[key]
        except KeyError:
            raise KeyError(self._missing_message(key)) from None

    def __setitem__(self, key: str, value: Any) -> None:
        self.set(key, value)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def get(self, key: str, default: Any = None) -> Any:
        """Return the attribute value, or ``default`` when it is absent."""
        return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Assign ``value`` to ``key`` and mark it unsaved.

        Raises:
            AttributeError: ``key`` is permanent (``id``) or protected
            ValueError: ``value`` is an empty string
        """
        if key in self.permanent_attributes or key in self.protected_fields:
            forbidden = ", ".join(sorted(self.permanent_attributes | self.protected_fields))
            raise AttributeError(
                f"Cannot set {key} on this object. HINT: you can't set: {forbidden}"
            )
        if isinstance(value, str) and value == "":
            raise ValueError(
                f"You cannot set {key} to an empty string. "
                "We interpret empty strings as None in requests. "
                f"You may set (object).{key} = None to delete the property."
            )

        self._values[key] = convert_to_tap_object(value, self._opts)
        self._dirty_value(self._values[key])
        self._unsaved_values.add(key)

    def _missing_message(self, name: str) -> str:
        message = f"{type(self).__name__!r} object has no attribute {name!r}"
        if name in self._transient_values:
            message += (
                f". HINT: The {name!r} attribute was set in the past, however. "
                "It was then wiped when refreshing the object with the result "
                "returned by Tap's API, probably as a result of a save(). "
                "The attributes currently available on this object are: "
                f"{', '.join(self._values)}"
            )
        return message

    # Comparison and rendering

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TapObject):
            return NotImplemented
        return self._values == other._values

    def __hash__(self) -> int:
        return hash(_freeze(self._values))

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), indent=2, sort_keys=True, default=str)

    def __repr__(self) -> str:
        id_string = f" id={self._values['id']}" if self._values.get("id") is not None else ""
        return (
            f"<{type(self).__module__}.{type(self).__name__} at 0x{id(self):x}{id_string}> "
            f"JSON: {self}"
        )

    @property
    def deleted(self) -> bool:
        return bool(self._values.get("deleted", False))

    def keys(self):
        return self._values.keys()

    def values(self):
        return self._values.values()

    def items(self):
        return self._values.items()

    def to_dict(self) -> dict[str, Any]:
        """Recursively convert to plain dicts and lists."""

        def maybe_to_dict(value: Any) -> Any:
            if isinstance(value, TapObject):
                return value.to_dict()
            if isinstance(value, list):
                return [maybe_to_dict(v) for v in value]
            return value

        return {key: maybe_to_dict(value) for key, value in self._values.items()}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str)

    # Pickling drops the bound client; it is not meaningful in another process.

    def __getstate__(self) -> dict[str, Any]:
        opts = {k: v for k, v in self._opts.items() if k != "client"}
        return {"values": self._values, "opts": opts}

    def __setstate__(self, state: dict[str, Any]) -> None:
        self.__init__(state["values"].get("id"))
        self.refresh_from(state["values"], state["opts"])

    # Change tracking

    def update_attributes(
        self,
        values: Mapping[str, Any],
        opts: Union[str, Mapping[str, Any], None] = None,
        dirty: bool = True,
    ) -> None:
        """Assign many attributes at once without the per-key checks of ``set``."""
        opts = self._opts if opts is None else opts
        for key, value in values.items():
            self._values[key] = convert_to_tap_object(value, opts)
            if dirty:
                self._dirty_value(self._values[key])
            self._unsaved_values.add(key)

    def dirty(self) -> None:
        """Mark every attribute, recursively, as unsaved."""
        self._unsaved_values = set(self._values)
        for value in self._values.values():
            self._dirty_value(value)

    def _dirty_value(self, value: Any) -> None:
        if isinstance(value, list):
            for item in value:
                self._dirty_value(item)
        elif isinstance(value, TapObject):
            value.dirty()

    def refresh_from(
        self,
        values: Mapping[str, Any],
        opts: Union[str, Mapping[str, Any], None] = None,
        partial: bool = False,
    ) -> "TapObject":
        """Reconcile this object with a payload returned by the API.

        Keys missing from ``values`` are dropped and remembered as transient
        (unless ``partial``), new keys are added, and the snapshot used to
        diff nested structures is replaced with a deep copy of ``values``.
        """
        self._opts = util.normalize_opts(opts)
        self._original_values = self._deep_copy(dict(values))

        removed = set() if partial else set(self._values) - set(values)
        for key in removed:
            del self._values[key]
            self._transient_values.add(key)
            self._unsaved_values.discard(key)

        self.update_attributes(values, self._opts, dirty=False)
        for key in values:
            self._transient_values.discard(key)
            self._unsaved_values.discard(key)

        return self

    # Update serialization

    def serialize_params(self, force: bool = False) -> dict[str, Any]:
        """Build the update payload holding only what changed since the last sync.

        Args:
            force: Serialize every attribute, changed or not

        Returns:
            Mapping of attribute name to serialized value
        """
        update: dict[str, Any] = {}

        for key, value in self._values.items():
            unsaved = key in self._unsaved_values
            if force or unsaved or isinstance(value, TapObject):
                update[key] = self._serialize_params_value(
                    value,
                    self._original_values.get(key),
                    unsaved,
                    force,
                    key=key,
                )

        return {key: value for key, value in update.items() if value is not None}

    def _serialize_params_value(
        self,
        value: Any,
        original: Any,
        unsaved: bool,
        force: bool,
        key: Optional[str] = None,
    ) -> Any:
        from .api_resource import APIResource

        if value is None:
            return ""

        if isinstance(value, APIResource):
            if not unsaved:
                return None
            if value.get("id") is not None:
                return value
            raise ValueError(
                f"Cannot save property `{key}` containing an API resource "
                "that has not been saved yet. Save it first so it has an id."
            )

        if isinstance(value, list):
            update = [self._serialize_params_value(v, None, True, force) for v in value]
            if update != self._serialize_params_value(original, None, True, force):
                return update
            return None

        if isinstance(value, TapObject):
            update = value.serialize_params(force=force)
            if (
                original is not None
                and key is not None
                and key in self.additive_object_params
                and (unsaved or update)
            ):
                update = {**self._empty_values(original), **update}
            if not update and not (unsaved or force):
                return None
            return update

        if isinstance(value, Mapping):
            return convert_to_tap_object(value, self._opts).serialize_params()

        return value

    @staticmethod
    def _empty_values(obj: Any) -> dict[str, str]:
        if isinstance(obj, TapObject):
            keys = obj._values
        elif isinstance(obj, Mapping):
            keys = obj
        else:
            raise ValueError(f"_empty_values got unexpected object type: {type(obj).__name__}")
        return {key: "" for key in keys}

    @classmethod
    def _deep_copy(cls, obj: Any) -> Any:
        if isinstance(obj, list):
            return [cls._deep_copy(item) for item in obj]
        if isinstance(obj, TapObject):
            return type(obj).construct_from(
                cls._deep_copy(obj._values),
                {k: v for k, v in obj._opts.items() if k in util.OPTS_COPYABLE},
            )
        if isinstance(obj, Mapping):
            return {key: cls._deep_copy(value) for key, value in obj.items()}
        return obj


__all__ = ["TapObject", "convert_to_tap_object"]
