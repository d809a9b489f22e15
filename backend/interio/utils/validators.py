"""Input validation utilities."""

import logging
from typing import Any, Dict, Type, TypeVar

from pydantic import BaseModel, ValidationError

from .errors import ErrorCode, raise_error


logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def build_model(model_cls: Type[M], data: Dict[str, Any]) -> M:
    """
    Validate data into a model, reporting failures as APIError.

    Args:
        model_cls: Pydantic model class
        data: Field values

    Returns:
        Validated model instance

    Raises:
        APIError: VALIDATION_ERROR (400) carrying the pydantic error list
    """
    try:
        return model_cls.model_validate(data)
    except ValidationError as e:
        errors = e.errors(include_url=False, include_context=False, include_input=False)
        logger.warning(f"{model_cls.__name__} validation failed: {errors}")
        raise_error(
            ErrorCode.VALIDATION_ERROR,
            f"Invalid {model_cls.__name__}: {errors[0]['msg']}",
            status_code=400,
            details=errors,
        )
