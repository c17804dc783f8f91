"""Parameter encoding and option helpers."""
from __future__ import annotations

from typing import Any, Mapping, Optional, Union
from urllib.parse import quote_plus

# Options a caller may pass on any call.
OPTS_USER_SPECIFIED = frozenset({"api_key", "tap_version"})
# Options carried over when a resource is deep-copied.
OPTS_COPYABLE = OPTS_USER_SPECIFIED | {"api_base"}
# Options carried from one call's result into the next call on it.
OPTS_PERSISTABLE = OPTS_USER_SPECIFIED


def objects_to_ids(params: Any) -> Any:
    """Replace API resources nested anywhere in ``params`` with their ids.

    None values inside mappings are dropped.
    """
    from .api_resource import APIResource
    from .tap_object import TapObject

    if isinstance(params, APIResource):
        return params.get("id")
    if isinstance(params, TapObject):
        return objects_to_ids(params.to_dict())
    if isinstance(params, Mapping):
        return {k: objects_to_ids(v) for k, v in params.items() if v is not None}
    if isinstance(params, (list, tuple)):
        return [objects_to_ids(v) for v in params]
    return params


def flatten_params(params: Mapping[str, Any], parent_key: Optional[str] = None) -> list[tuple[str, Any]]:
    """Flatten nested mappings and sequences into ``a[b][0]=c`` style pairs.

    Order is preserved because arrays of hashes can be order sensitive.
    """
    result: list[tuple[str, Any]] = []

    for key, value in params.items():
        calculated_key = f"{parent_key}[{key}]" if parent_key else str(key)
        if isinstance(value, Mapping):
            result.extend(flatten_params(value, calculated_key))
        elif isinstance(value, (list, tuple)):
            result.extend(flatten_params_array(value, calculated_key))
        else:
            result.append((calculated_key, value))

    return result


def flatten_params_array(value: Union[list, tuple], calculated_key: str) -> list[tuple[str, Any]]:
    result: list[tuple[str, Any]] = []
    for i, elem in enumerate(value):
        if isinstance(elem, Mapping):
            result.extend(flatten_params(elem, f"{calculated_key}[{i}]"))
        elif isinstance(elem, (list, tuple)):
            result.extend(flatten_params_array(elem, calculated_key))
        else:
            result.append((f"{calculated_key}[{i}]", elem))
    return result


def url_encode(value: Any) -> str:
    """Form-encode ``value`` but keep brackets readable."""
    return quote_plus(str(value)).replace("%5B", "[").replace("%5D", "]")


def encode_parameters(params: Mapping[str, Any]) -> str:
    return "&".join(f"{url_encode(k)}={url_encode(v)}" for k, v in flatten_params(params))


def normalize_id(id: Any) -> tuple[Any, dict[str, Any]]:
    """Split ``{"id": ..., **params}`` into the id and the remaining params."""
    if isinstance(id, Mapping):
        params = dict(id)
        return params.pop("id", None), params
    return id, {}


def check_api_key(key: Any) -> str:
    if not isinstance(key, str):
        raise TypeError("api_key must be a string")
    return key


def normalize_opts(opts: Union[str, Mapping[str, Any], None]) -> dict[str, Any]:
    """Turn a bare API key, a mapping or None into a fresh opts dict."""
    if opts is None:
        return {}
    if isinstance(opts, str):
        return {"api_key": opts}
    if isinstance(opts, Mapping):
        if "api_key" in opts and opts["api_key"] is not None:
            check_api_key(opts["api_key"])
        return dict(opts)
    raise TypeError("normalize_opts expects a string or a mapping")


def normalize_headers(headers: Mapping[str, Any]) -> dict[str, Any]:
    """Canonicalize header names: ``tap_version`` -> ``Tap-Version``."""
    normalized = {}
    for key, value in headers.items():
        parts = [p for p in str(key).replace("_", "-").split("-") if p]
        normalized["-".join(p.capitalize() for p in parts)] = value
    return normalized


__all__ = [
    "OPTS_COPYABLE",
    "OPTS_PERSISTABLE",
    "OPTS_USER_SPECIFIED",
    "check_api_key",
    "encode_parameters",
    "flatten_params",
    "flatten_params_array",
    "normalize_headers",
    "normalize_id",
    "normalize_opts",
    "objects_to_ids",
    "url_encode",
]
