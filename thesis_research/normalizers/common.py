"""Shared parsing helpers for provider payloads."""

import math
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from thesis_research.errors import SchemaValidationError


ModelT = TypeVar("ModelT", bound=BaseModel)

# Values providers use for "no data"
NULL_SENTINELS = frozenset({"", "none", "-", "n/a", "na", "null", "nan"})


def parse_number(value: str | int | float | None) -> float | None:
    """Convert a provider value to a finite float or ``None``.

    ``"None"``, ``"-"``, empty strings, unparseable text, NaN and infinities
    all become ``None``; never ``0``.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = value.strip()
        if text.lower() in NULL_SENTINELS:
            return None
        try:
            number = float(text.replace(",", ""))
        except ValueError:
            return None

    return number if math.isfinite(number) else None


def parse_percent(value: str | int | float | None) -> float | None:
    """Parse ``"1.25%"`` as ``1.25`` (percent points, not a ratio)."""
    if isinstance(value, str):
        value = value.strip().removesuffix("%")
    return parse_number(value)


def parse_int(value: str | int | float | None) -> int | None:
    number = parse_number(value)
    return int(number) if number is not None else None


def parse_text(value: str | None) -> str | None:
    """Strip text, mapping sentinel values to ``None``."""
    if value is None:
        return None
    text = value.strip()
    if text.lower() in NULL_SENTINELS:
        return None
    return text


def parse_payload(model: type[ModelT], payload: Any, source: str) -> ModelT:
    """Validate a raw payload, raising :class:`SchemaValidationError` on mismatch."""
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise SchemaValidationError(
            source,
            f"Unexpected {model.__name__} payload: {e.error_count()} validation error(s)",
            errors=e.errors(include_url=False),
            payload=payload,
        ) from e


def parse_payload_list(model: type[ModelT], payload: Any, source: str) -> list[ModelT]:
    """Validate a JSON array payload item by item."""
    if not isinstance(payload, list):
        raise SchemaValidationError(
            source,
            f"Expected a JSON array of {model.__name__}, got {type(payload).__name__}",
            payload=payload,
        )
    return [parse_payload(model, item, source) for item in payload]
