"""
Bot response (template) schemas.

Templates are stored inside the project document (`projects.templates`).
Extra fields (`match`, `metadata`, ...) are kept as they come.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SequenceItem(BaseModel):
    model_config = ConfigDict(extra="allow")

    # YAML document, e.g. "text: hello\n"
    content: str


class LocalizedValue(BaseModel):
    model_config = ConfigDict(extra="allow")

    lang: str = Field(..., min_length=1)
    sequence: List[SequenceItem] = Field(default_factory=list)


class Template(BaseModel):
    model_config = ConfigDict(extra="allow")

    key: str = Field(..., min_length=1)
    values: List[LocalizedValue] = Field(..., min_length=1)

    @field_validator("values")
    @classmethod
    def one_value_per_language(cls, values: List[LocalizedValue]) -> List[LocalizedValue]:
        seen = set()
        for value in values:
            if value.lang in seen:
                raise ValueError(f"duplicate language '{value.lang}'")
            seen.add(value.lang)
        return values

    def to_document(self) -> dict:
        return self.model_dump()


__all__ = [
    "SequenceItem",
    "LocalizedValue",
    "Template",
]
