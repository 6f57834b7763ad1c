"""Typed access to raw tool arguments.

Tools accept both the camelCase and snake_case spelling of each argument
(``threadId`` / ``thread_id``) as well as the legacy ``server_id`` /
``channel_id`` aliases. Malformed values raise :class:`ValidationError`.
"""

from typing import Any, List, Mapping, Optional

from discord_forum_mcp.errors import ValidationError


def _pick(arguments: Mapping[str, Any], names) -> Any:
    for name in names:
        value = arguments.get(name)
        if value is not None:
            return value
    return None


def optional_str(arguments: Mapping[str, Any], *names: str) -> Optional[str]:
    value = _pick(arguments, names)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise ValidationError(f"{names[0]} must be a string")
    value = str(value).strip()
    return value or None


def required_str(arguments: Mapping[str, Any], *names: str) -> str:
    value = optional_str(arguments, *names)
    if value is None:
        raise ValidationError(f"{names[0]} is required")
    return value


def message_text(arguments: Mapping[str, Any], *names: str) -> str:
    """Like :func:`required_str` but keeps surrounding whitespace."""
    value = _pick(arguments, names)
    if value is None or value == "":
        raise ValidationError(f"{names[0]} is required")
    if not isinstance(value, str):
        raise ValidationError(f"{names[0]} must be a string")
    return value


def snowflake(arguments: Mapping[str, Any], *names: str) -> Optional[str]:
    value = optional_str(arguments, *names)
    if value is not None and not value.isdigit():
        raise ValidationError(f"{names[0]} must be a numeric Discord ID, got '{value}'")
    return value


def bounded_int(
    arguments: Mapping[str, Any],
    *names: str,
    default: int,
    minimum: int,
    maximum: int,
) -> int:
    value = _pick(arguments, names)
    if value is None:
        return default
    if isinstance(value, bool):
        raise ValidationError(f"{names[0]} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{names[0]} must be a number") from None
    if not number.is_integer():
        raise ValidationError(f"{names[0]} must be a whole number")
    if not minimum <= number <= maximum:
        raise ValidationError(
            f"{names[0]} must be between {minimum} and {maximum}, got {int(number)}"
        )
    return int(number)


def flag(arguments: Mapping[str, Any], *names: str, default: bool) -> bool:
    value = _pick(arguments, names)
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in {"true", "false"}:
        return value.lower() == "true"
    raise ValidationError(f"{names[0]} must be a boolean")


def string_list(arguments: Mapping[str, Any], *names: str) -> List[str]:
    value = _pick(arguments, names)
    if not isinstance(value, list) or not value:
        raise ValidationError(f"{names[0]} must be a non-empty array of strings")
    if not all(isinstance(item, str) and item.strip() for item in value):
        raise ValidationError(f"{names[0]} must only contain non-empty strings")
    return [item.strip() for item in value]
