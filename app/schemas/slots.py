"""
Slot schemas.

One model per slot type; `SLOT_SCHEMAS` maps the `type` tag to its model.
Unknown fields are rejected.
"""

from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, model_validator


SLOT_NAME_PATTERN = r"^[a-zA-Z0-9_]+$"


class BaseSlot(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    id: Optional[str] = Field(None, alias="_id")
    name: str = Field(..., min_length=1, pattern=SLOT_NAME_PATTERN)
    projectId: str
    type: str
    # Botfront stores the UI grouping of a slot here
    category: Optional[str] = None


class TextSlot(BaseSlot):
    initialValue: Optional[str] = None


class BoolSlot(BaseSlot):
    initialValue: Optional[bool] = None


class CategoricalSlot(BaseSlot):
    categories: List[str] = Field(..., min_length=1)
    initialValue: Optional[str] = None

    @model_validator(mode="after")
    def initial_value_is_a_category(self):
        if self.initialValue is not None and self.initialValue not in self.categories:
            raise ValueError("initialValue must be one of categories")
        return self


class FloatSlot(BaseSlot):
    minValue: Optional[float] = None
    maxValue: Optional[float] = None
    initialValue: Optional[float] = None

    @model_validator(mode="after")
    def min_not_above_max(self):
        if self.minValue is not None and self.maxValue is not None and self.minValue > self.maxValue:
            raise ValueError("minValue must not be greater than maxValue")
        return self


class ListSlot(BaseSlot):
    initialValue: Optional[List[Any]] = None


class UnfeaturizedSlot(BaseSlot):
    initialValue: Any = None


SLOT_SCHEMAS: Dict[str, Type[BaseSlot]] = {
    "text": TextSlot,
    "bool": BoolSlot,
    "categorical": CategoricalSlot,
    "float": FloatSlot,
    "list": ListSlot,
    "unfeaturized": UnfeaturizedSlot,
}


__all__ = [
    "BaseSlot",
    "TextSlot",
    "BoolSlot",
    "CategoricalSlot",
    "FloatSlot",
    "ListSlot",
    "UnfeaturizedSlot",
    "SLOT_SCHEMAS",
]
