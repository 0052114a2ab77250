"""Validation helpers shared by models read back from project files."""

from typing import Any

from pydantic import BaseModel, ValidationInfo
from pydantic_core import PydanticUndefined


def null_to_default(model_cls: type[BaseModel], value: Any, info: ValidationInfo) -> Any:
    """Treat an explicit ``null`` like a missing key.

    Required fields have no default and keep the ``None``, so validation
    still rejects them.
    """
    if value is not None:
        return value
    default = model_cls.model_fields[info.field_name].get_default(call_default_factory=True)
    return value if default is PydanticUndefined else default
