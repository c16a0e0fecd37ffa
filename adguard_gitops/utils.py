"""
Utility functions for AdGuard GitOps Controller.
Contains common operations, helpers, and unit conversions.
"""

from typing import Any, Iterable, List, Optional, Union
from rich.console import Console
from rich.markup import escape

from adguard_gitops.constants import MS_PER_HOUR, MS_PER_MINUTE, MINUTES_PER_DAY

console = Console()


# ============================================================================
# UNIT UTILITIES
# ============================================================================

def hours_to_ms(hours: int) -> int:
    """
    Convert an interval in hours to milliseconds.

    Examples:
        >>> hours_to_ms(24)
        86400000
    """
    return int(hours) * MS_PER_HOUR


def ms_to_hours(ms: Union[int, float]) -> int:
    """
    Convert milliseconds to whole hours (truncating).

    Examples:
        >>> ms_to_hours(86400000)
        24
        >>> ms_to_hours(3599999)
        0
    """
    return int(ms) // MS_PER_HOUR


def minutes_to_ms(minutes: int) -> int:
    return int(minutes) * MS_PER_MINUTE


def ms_to_minutes(ms: Union[int, float]) -> int:
    return int(ms) // MS_PER_MINUTE


def clock_to_minutes(value: Union[int, str], allow_end_of_day: bool = False) -> int:
    """
    Parse a minute-of-day value given either as int or as "HH:MM".

    Args:
        value: Minutes from midnight or clock string
        allow_end_of_day: Accept "24:00" (used for range ends)

    Returns:
        Minutes from midnight

    Raises:
        ValueError: On malformed clock strings

    Examples:
        >>> clock_to_minutes("07:30")
        450
        >>> clock_to_minutes("24:00", allow_end_of_day=True)
        1440
    """
    if isinstance(value, bool):
        raise ValueError(f"invalid time of day: {value!r}")
    if isinstance(value, int):
        return value

    text = str(value).strip()
    parts = text.split(":")
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        raise ValueError(f"invalid time of day: {value!r} (expected HH:MM)")

    hours, minutes = int(parts[0]), int(parts[1])
    if minutes > 59:
        raise ValueError(f"invalid time of day: {value!r}")
    if hours == 24 and minutes == 0 and allow_end_of_day:
        return MINUTES_PER_DAY
    if hours > 23:
        raise ValueError(f"invalid time of day: {value!r}")
    return hours * 60 + minutes


# ============================================================================
# OBJECT UTILITIES
# ============================================================================

def safe_getattr(obj: Any, attr: str, default: Any = None) -> Any:
    """
    Safely get attribute from object with default value.
    Handles both dict and object attribute access.

    Args:
        obj: Object to get attribute from
        attr: Attribute name
        default: Default value if not found

    Returns:
        Attribute value or default
    """
    if isinstance(obj, dict):
        return obj.get(attr, default)
    return getattr(obj, attr, default)


# ============================================================================
# COLLECTION UTILITIES
# ============================================================================

def string_list(values: Optional[Iterable[Any]], attribute: str = "value") -> List[str]:
    """
    Convert an iterable into a list of strings, rejecting other element types.

    Args:
        values: Iterable to convert (None becomes an empty list)
        attribute: Attribute name used in error messages

    Returns:
        List of strings in the original order

    Raises:
        TypeError: If an element is not a string
    """
    result: List[str] = []
    for item in values or []:
        if not isinstance(item, str):
            raise TypeError(f"{attribute}: expected string element, got {type(item).__name__} {item!r}")
        result.append(item)
    return result


def sorted_strings(values: Optional[Iterable[Any]], attribute: str = "value") -> List[str]:
    """Same as string_list, but sorted and de-duplicated (for set-typed fields)."""
    return sorted(set(string_list(values, attribute)))


# ============================================================================
# LOGGING UTILITIES
# ============================================================================

def log_error(message: str, exception: Optional[Exception] = None):
    """Log error message with optional exception details."""
    if exception:
        console.print(f"[red]{message}: {escape(str(exception))}[/red]")
    else:
        console.print(f"[red]{message}[/red]")


def log_warning(message: str):
    """Log warning message."""
    console.print(f"[yellow]{message}[/yellow]")


def log_success(message: str):
    """Log success message."""
    console.print(f"[green]{message}[/green]")


def log_info(message: str):
    """Log info message."""
    console.print(f"[cyan]{message}[/cyan]")


def log_debug(message: str):
    """Log debug message."""
    console.print(f"[dim]{message}[/dim]")


def log_dry_run(action: str, details: str):
    """Log dry-run action."""
    console.print(f"[yellow][DRY] {action}: {details}[/yellow]")
