from typing import Any, Iterable, Sequence


class DiscordToolError(Exception):
    """Base class for every failure a tool call can report."""

    kind = "error"


class NotFound(DiscordToolError):
    kind = "not_found"


class AmbiguousTarget(DiscordToolError):
    """More than one entity matched; ``candidates`` holds all of them."""

    kind = "ambiguous_target"

    def __init__(self, message: str, candidates: Sequence[Any] = ()):
        super().__init__(message)
        self.candidates = tuple(candidates)


class ValidationError(DiscordToolError):
    kind = "validation_error"


class ExternalApiError(DiscordToolError):
    kind = "external_api_error"


def describe(entities: Iterable[Any], prefix: str = "") -> str:
    """Render ``name (id)`` pairs for error messages."""
    rendered = ", ".join(f"{prefix}{e.name} ({e.id})" for e in entities)
    return rendered or "none"
