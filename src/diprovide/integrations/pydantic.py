from collections.abc import Mapping
from typing import Any

_PydanticBaseModel: type[Any] | None = None
try:
    from pydantic import BaseModel as _PydanticBaseModel
except ImportError:  # pragma: no cover - pydantic is an optional extra
    pass

BaseModel: type[Any] | None = _PydanticBaseModel


def is_pydantic_model(value: object) -> bool:
    """Return whether ``value`` is a pydantic model instance.

    Always ``False`` when pydantic is not installed.
    """
    return BaseModel is not None and isinstance(value, BaseModel)


def update_pydantic_model(model: Any, patch: Mapping[str, Any]) -> Any:
    """Return a shallow copy of ``model`` with the fields of ``patch`` applied.

    The copy is not re-validated, mirroring ``BaseModel.model_copy``.
    """
    return model.model_copy(update=dict(patch))


__all__ = ["BaseModel", "is_pydantic_model", "update_pydantic_model"]
