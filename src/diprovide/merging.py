from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any

from diprovide.exceptions import DIProvidePartialMockShapeError
from diprovide.integrations.pydantic import is_pydantic_model, update_pydantic_model


def shallow_merge(original: Any, patch: Any) -> Any:
    """Overlay the fields of ``patch`` onto ``original`` and return the result.

    ``original`` is never modified: mappings are copied into a new ``dict``,
    dataclass instances go through ``dataclasses.replace`` and pydantic models
    through ``model_copy``. Fields of ``patch`` win on collision.

    Args:
        original: The resolution of the mocked provider.
        patch: The resolution of the partial mock. Must be a mapping.

    Returns:
        The merged value.

    Raises:
        DIProvidePartialMockShapeError: If either side is not field-keyed.

    """
    if not isinstance(patch, Mapping):
        msg = f"A partial mock must resolve to a mapping of fields, got {type(patch).__name__}."
        raise DIProvidePartialMockShapeError(msg)

    if isinstance(original, Mapping):
        return {**original, **patch}

    if dataclasses.is_dataclass(original) and not isinstance(original, type):
        _check_fields(original, patch, {field.name for field in dataclasses.fields(original)})
        return dataclasses.replace(original, **patch)

    if is_pydantic_model(original):
        _check_fields(original, patch, set(type(original).model_fields))
        return update_pydantic_model(original, patch)

    msg = (
        f"Cannot partially mock a resolution of type {type(original).__name__}; "
        "only mappings, dataclass instances and pydantic models can be merged."
    )
    raise DIProvidePartialMockShapeError(msg)


def _check_fields(original: Any, patch: Mapping[Any, Any], fields: set[str]) -> None:
    unknown = [key for key in patch if key not in fields]
    if unknown:
        msg = (
            f"Partial mock sets unknown fields of {type(original).__name__}: "
            f"{', '.join(map(repr, unknown))}."
        )
        raise DIProvidePartialMockShapeError(msg)
