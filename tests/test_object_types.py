"""
Tests for the object type registry
"""
import pytest

from tap_sdk import Authorize, Card, Charge, Customer, ListObject, Refund, TapObject, Token
from tap_sdk.object_types import object_class_for, object_names_to_classes, register_object_type


class TestRegistry:
    """Tests for type tag lookup."""

    def test_builtin_types(self):
        """Should know every resource shipped with the SDK."""
        expected = {
            "authorize": Authorize,
            "card": Card,
            "charge": Charge,
            "customer": Customer,
            "list": ListObject,
            "refund": Refund,
            "token": Token,
        }
        registered = object_names_to_classes()

        for name, cls in expected.items():
            assert registered[name] is cls

    def test_default_for_unknown(self):
        """Should return the default for unknown or missing tags."""
        assert object_class_for("nope", TapObject) is TapObject
        assert object_class_for(None, TapObject) is TapObject
        assert object_class_for(5) is None

    def test_register_requires_name(self):
        """Should refuse classes without an OBJECT_NAME."""
        with pytest.raises(ValueError, match="OBJECT_NAME"):

            @register_object_type
            class Nameless(TapObject):
                pass
