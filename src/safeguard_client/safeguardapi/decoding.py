"""Decode raw response bodies into pydantic types."""

from typing import Any, TypeVar

import pydantic
import structlog

from .errors import DecodeError

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def decode(raw: bytes, type_: Any) -> Any:
    """Validate a JSON body against ``type_`` (a model or e.g. ``list[Model]``).

    Raises:
        DecodeError: If the body is not valid JSON or does not match.
    """
    try:
        return pydantic.TypeAdapter(type_).validate_json(raw)
    except pydantic.ValidationError as e:
        logger.warning(
            "Failed to decode response",
            expected=str(type_),
            error_count=e.error_count(),
        )
        msg = f"cannot decode response as {type_}: {e}"
        raise DecodeError(msg, body=raw) from e


def decode_model(raw: bytes, model: type[T]) -> T:
    return decode(raw, model)


def decode_list(raw: bytes, model: type[T]) -> list[T]:
    return decode(raw, list[model])  # type: ignore[valid-type]
