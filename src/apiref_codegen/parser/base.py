"""Data models for documentation input and the extracted reference graph.

Documentation pages are parsed into ``DocNode`` trees; the extractor turns
them into ``Reference`` records, which are what the interchange artifact
(``references.json``) holds and what the code generator consumes.
"""

import json
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator


class ApiParam(BaseModel):
    """A single documented endpoint parameter."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    type: str = ""  # raw type token, e.g. "string", "array of objects"
    location: str = Field(default="body", alias="in")  # path / body / header / query
    required: bool = False
    desc: str = ""

    # Published docs leave unset text as null.
    @field_validator("type", "desc", mode="before")
    @classmethod
    def _null_text(cls, value):
        return "" if value is None else value

    @field_validator("required", mode="before")
    @classmethod
    def _null_required(cls, value):
        return False if value is None else value


class ApiMeta(BaseModel):
    method: str
    url: str
    params: list[ApiParam] = []

    @field_validator("params", mode="before")
    @classmethod
    def _null_params(cls, value):
        return [] if value is None else value


class DocNode(BaseModel):
    """One page (or sub-page) of published API reference documentation."""

    title: str
    slug: str
    type: str  # basic / endpoint / ...
    body: str = ""
    excerpt: str = ""
    api: ApiMeta | None = None
    children: list["DocNode"] = []

    @field_validator("body", "excerpt", mode="before")
    @classmethod
    def _null_text(cls, value):
        return "" if value is None else value

    @field_validator("children", mode="before")
    @classmethod
    def _null_children(cls, value):
        return [] if value is None else value


class TypeNode(BaseModel):
    """A node of the inferred type language.

    ``type`` is one of string / number / boolean / object / array / unknown
    (anything else renders as unknown). The optional attributes refine it.
    """

    model_config = ConfigDict(populate_by_name=True)

    type: str
    starts_with: str | None = Field(default=None, alias="startsWith")
    possible_values: list[str] | None = Field(default=None, alias="possibleValues")
    fields: list["TypeField"] | None = None
    id: str | None = None  # soft reference to another Reference, resolved at emission
    array_types: list["TypeNode"] | None = Field(default=None, alias="arrayTypes")


class TypeField(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    types: list[TypeNode] = Field(alias="type")
    required: bool = True
    description: str = ""


TypeNode.model_rebuild()
TypeField.model_rebuild()


class EnumValue(BaseModel):
    name: str
    description: str = ""


class BaseReference(BaseModel):
    product: str
    parent: str | None = None
    id: str
    name: str
    description: str = ""


class TypeReference(BaseReference):
    kind: Literal["type"] = "type"
    fields: list[TypeField] = []


class EnumReference(BaseReference):
    kind: Literal["enum"] = "enum"
    values: list[EnumValue] = []


class RequestReference(BaseReference):
    kind: Literal["request"] = "request"
    method: str
    path: str  # /customers/{id}
    params: list[TypeField] = []
    body: list[TypeField] = []
    query: list[TypeField] = []
    headers: list[TypeField] = []


Reference = Annotated[
    Union[TypeReference, EnumReference, RequestReference],
    Field(discriminator="kind"),
]

ReferenceAdapter: TypeAdapter[Reference] = TypeAdapter(Reference)
ReferenceList: TypeAdapter[list[Reference]] = TypeAdapter(list[Reference])


def dump_references(references: list[Reference]) -> str:
    """Serialize references to the interchange JSON text."""
    data = ReferenceList.dump_python(references, mode="json", by_alias=True, exclude_none=True)
    return json.dumps(data, indent=2) + "\n"


def load_references(text: str) -> list[Reference]:
    """Parse interchange JSON text back into references."""
    return ReferenceList.validate_json(text)

