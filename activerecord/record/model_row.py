"""
Typed row prototype backed by a pydantic model.
"""

from __future__ import annotations

from typing import Any, Generic, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel

M = TypeVar("M", bound=BaseModel)


class ModelRow(Generic[M]):
    """
    Row prototype that validates each row into an instance of ``model_cls``.

    Use it as ``row_prototype`` of an ``ActiveRecord`` to get typed rows:

        users = ActiveRecord("id", "users", adapter, row_prototype=ModelRow(User))
        user = users.load(42).model
    """

    def __init__(self, model_cls: Type[M]) -> None:
        self.model_cls = model_cls
        self.model: Optional[M] = None

    def clear(self) -> None:
        self.model = None

    def populate(self, data: Mapping[str, Any]) -> "ModelRow[M]":
        self.model = self.model_cls.model_validate(dict(data))
        return self

    def to_dict(self) -> dict[str, Any]:
        return self.model.model_dump() if self.model is not None else {}

    def __getitem__(self, column: str) -> Any:
        if self.model is None or column not in type(self.model).model_fields:
            raise KeyError(column)
        return getattr(self.model, column)

    def __repr__(self) -> str:
        return f"ModelRow({self.model_cls.__name__}, model={self.model!r})"


__all__ = ["ModelRow"]
