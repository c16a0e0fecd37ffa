"""
Generic field mapper between declared models and AdGuard Home wire shapes.

Each subsystem describes its flat fields as a table of FieldSpec entries.
The table drives both directions, so adding a field means adding one line.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, ValidationError

from adguard_gitops.errors import MappingFailed
from adguard_gitops.utils import (
    hours_to_ms,
    ms_to_hours,
    string_list,
    sorted_strings,
    safe_getattr,
)

T = TypeVar('T', bound=BaseModel)

_MISSING = object()


# ============================================================================
# CONVERTERS
# ============================================================================

def _identity(value: Any, attribute: str) -> Any:
    return value


def _as_bool(value: Any, attribute: str) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"{attribute}: expected boolean, got {type(value).__name__} {value!r}")
    return value


def _as_int(value: Any, attribute: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{attribute}: expected integer, got {type(value).__name__} {value!r}")
    return int(value)


def _as_str(value: Any, attribute: str) -> str:
    # AdGuard Home reports unset strings as null on some versions
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeError(f"{attribute}: expected string, got {type(value).__name__} {value!r}")
    return value


def _as_list(value: Any, attribute: str) -> list:
    return string_list(value, attribute)


def _as_set(value: Any, attribute: str) -> set:
    return set(string_list(value, attribute))


def _as_sorted(value: Any, attribute: str) -> list:
    return sorted_strings(value, attribute)


def _as_optional_list(value: Any, attribute: str) -> Optional[list]:
    if value is None:
        return None
    return string_list(value, attribute)


def _optional_list_to_remote(value: Any, attribute: str) -> list:
    return string_list(value, attribute)


def _hours_to_ms(value: Any, attribute: str) -> int:
    return hours_to_ms(_as_int(value, attribute))


def _ms_to_hours(value: Any, attribute: str) -> int:
    return ms_to_hours(_as_int(value, attribute))


# ============================================================================
# FIELD TABLE
# ============================================================================

@dataclass(frozen=True)
class FieldSpec:
    """
    One declared attribute and its wire counterpart.

    Attributes:
        name: Attribute name on the declared model
        remote: Key in the remote payload (defaults to name)
        to_remote: Converter applied when building the request
        to_declared: Converter applied when reading the response
        default: Value used when the response lacks the key; without it
            a missing key is a mapping failure
    """
    name: str
    remote: Optional[str] = None
    to_remote: Callable[[Any, str], Any] = _identity
    to_declared: Callable[[Any, str], Any] = _identity
    default: Any = field(default=_MISSING, compare=False)

    @property
    def wire_name(self) -> str:
        return self.remote or self.name


def bool_field(name: str, remote: Optional[str] = None, **kwargs) -> FieldSpec:
    return FieldSpec(name, remote, _as_bool, _as_bool, **kwargs)


def int_field(name: str, remote: Optional[str] = None, **kwargs) -> FieldSpec:
    return FieldSpec(name, remote, _as_int, _as_int, **kwargs)


def str_field(name: str, remote: Optional[str] = None, **kwargs) -> FieldSpec:
    return FieldSpec(name, remote, _as_str, _as_str, **kwargs)


def list_field(name: str, remote: Optional[str] = None, **kwargs) -> FieldSpec:
    """Ordered string collection."""
    return FieldSpec(name, remote, _as_list, _as_list, **kwargs)


def set_field(name: str, remote: Optional[str] = None, **kwargs) -> FieldSpec:
    """Unordered string collection; sent sorted so payloads are stable."""
    return FieldSpec(name, remote, _as_sorted, _as_set, **kwargs)


def optional_list_field(name: str, remote: Optional[str] = None, **kwargs) -> FieldSpec:
    """Ordered string collection where null is a distinct declared value."""
    return FieldSpec(name, remote, _optional_list_to_remote, _as_optional_list, **kwargs)


def hours_field(name: str, remote: Optional[str] = None, **kwargs) -> FieldSpec:
    """Declared in hours, sent and received in milliseconds."""
    return FieldSpec(name, remote, _hours_to_ms, _ms_to_hours, **kwargs)


def mapped_field(name: str, to_remote: Callable[[Any], Any], to_declared: Callable[[Any], Any],
                 remote: Optional[str] = None, **kwargs) -> FieldSpec:
    """Field with single-argument value translators (e.g. enumerated aliases)."""
    return FieldSpec(
        name,
        remote,
        lambda value, attribute: to_remote(value),
        lambda value, attribute: to_declared(value),
        **kwargs,
    )


# ============================================================================
# MAPPING
# ============================================================================

def fields_to_remote(source: Any, specs: Sequence[FieldSpec], subsystem: str) -> Dict[str, Any]:
    """
    Build the wire payload for the given field table.

    Args:
        source: Declared model (or dict) to read attributes from
        specs: Field table of the subsystem
        subsystem: Name used in error messages

    Returns:
        Remote payload dictionary

    Raises:
        MappingFailed: If a value cannot be converted
    """
    payload: Dict[str, Any] = {}
    for spec in specs:
        attribute = f"{subsystem}.{spec.name}"
        value = safe_getattr(source, spec.name)
        try:
            payload[spec.wire_name] = spec.to_remote(value, attribute)
        except (TypeError, ValueError) as e:
            raise MappingFailed(f"cannot convert {attribute} to remote form: {e}") from e
    return payload


def fields_to_declared(remote: Any, specs: Sequence[FieldSpec], subsystem: str) -> Dict[str, Any]:
    """
    Extract declared attributes from a remote response.

    Args:
        remote: Response object (dict) of the AdGuard Home API
        specs: Field table of the subsystem
        subsystem: Name used in error messages

    Returns:
        Dictionary keyed by declared attribute names

    Raises:
        MappingFailed: If the response is not an object, a required key
            is missing, or a value cannot be converted
    """
    if not isinstance(remote, dict):
        raise MappingFailed(f"{subsystem}: expected object in response, got {type(remote).__name__}")

    result: Dict[str, Any] = {}
    for spec in specs:
        attribute = f"{subsystem}.{spec.name}"
        if spec.wire_name not in remote:
            if spec.default is _MISSING:
                raise MappingFailed(f"{attribute}: key '{spec.wire_name}' missing in response")
            result[spec.name] = spec.default
            continue
        try:
            result[spec.name] = spec.to_declared(remote[spec.wire_name], attribute)
        except (TypeError, ValueError) as e:
            raise MappingFailed(f"cannot convert {attribute} to declared form: {e}") from e
    return result


def sub_object(remote: Any, key: str, subsystem: str) -> Dict[str, Any]:
    """Return a nested response object, failing if it is absent or not an object."""
    value = safe_getattr(remote, key) if isinstance(remote, dict) else None
    if not isinstance(value, dict):
        raise MappingFailed(f"{subsystem}: cannot decode '{key}' (got {type(value).__name__})")
    return value


def build_model(model: Type[T], data: Dict[str, Any], subsystem: str) -> T:
    """Validate mapped data into a declared model, reporting schema drift as MappingFailed."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise MappingFailed(f"{subsystem}: response does not fit {model.__name__}: {e}") from e


