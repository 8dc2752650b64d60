"""
Typed decoding of API responses.

Malformed JSON and shape mismatches are raised as distinct errors so the
caller can log which of the two happened.
"""
import json
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from ..errors import BodyShapeError, CheckFailedError, MalformedBodyError

ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_json(response: httpx.Response) -> Any:
    """Decode the response body as JSON."""
    try:
        return json.loads(response.text)
    except json.JSONDecodeError as e:
        raise MalformedBodyError(f"Invalid JSON: {e}", response.text) from e


def validate_as(data: Any, model: type[ModelT], raw_body: str = "") -> ModelT:
    """Validate already-decoded JSON against a result model."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise BodyShapeError(
            f"Response does not match {model.__name__}: {e.error_count()} error(s): {_first_error(e)}",
            raw_body,
        ) from e


def validate_items(data: Any, model: type[ModelT], raw_body: str = "") -> tuple[list[ModelT], list[BodyShapeError]]:
    """
    Validate each element of a JSON array on its own.

    Returns the valid items in order along with one BodyShapeError per
    rejected item. Only a non-array body raises.
    """
    if not isinstance(data, list):
        raise BodyShapeError(f"Expected a JSON array, got {type(data).__name__}", raw_body)
    items, errors = [], []
    for index, item in enumerate(data):
        try:
            items.append(model.model_validate(item))
        except ValidationError as e:
            errors.append(BodyShapeError(
                f"Item {index} does not match {model.__name__}: {_first_error(e)}",
                json.dumps(item, default=str),
            ))
    return items, errors


def decode(response: httpx.Response, model: type[ModelT]) -> ModelT:
    return validate_as(parse_json(response), model, response.text)


def require(condition: bool, message: str, raw_body: str = ""):
    """Raise CheckFailedError unless the condition holds."""
    if not condition:
        raise CheckFailedError(message, raw_body)


def _first_error(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"]) or "<root>"
    return f"{location}: {first['msg']}"
