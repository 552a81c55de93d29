"""Shapes of the structured fields that boards, cards and views persist as text."""
from typing import Any, Dict, List, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter
from pydantic.alias_generators import to_camel

PropertyType = Literal[
    "select",
    "multiSelect",
    "text",
    "date",
    "number",
    "url",
    "email",
    "phone",
    "checkbox",
    "person",
    "multiPerson",
    "createdBy",
    "createdTime",
    "updatedBy",
    "updatedTime",
]

PropertyColor = Literal[
    "propColorDefault",
    "propColorGray",
    "propColorBrown",
    "propColorOrange",
    "propColorYellow",
    "propColorGreen",
    "propColorBlue",
    "propColorPurple",
    "propColorPink",
    "propColorRed",
]


class PropertyOption(BaseModel):
    id: str
    value: str
    color: PropertyColor = "propColorDefault"


class CardProperty(BaseModel):
    id: str
    name: str
    type: PropertyType
    options: List[PropertyOption] = Field(default_factory=list)


class SortOption(BaseModel):
    property_id: str
    reversed: bool = False

    class Config:
        alias_generator = to_camel
        populate_by_name = True


BoardProperties = TypeAdapter(List[CardProperty])
CardValues = TypeAdapter(Dict[str, str])
OpaqueObject = TypeAdapter(Dict[str, Any])
SortOptions = TypeAdapter(List[SortOption])
PropertyIdList = TypeAdapter(List[str])
ColumnWidths = TypeAdapter(Dict[str, Union[int, float]])
