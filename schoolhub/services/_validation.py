"""Turn pydantic validation failures into domain ValidationErrors."""
from typing import Any, TypeVar

import pydantic
from pydantic import BaseModel

from schoolhub.errors import ValidationError

M = TypeVar("M", bound=BaseModel)


def parse(model: type[M], data: Any) -> M:
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) or "body" for err in e.errors())
        raise ValidationError(f"Invalid or missing fields: {fields}") from e
