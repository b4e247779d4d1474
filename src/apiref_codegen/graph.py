"""The reference graph: an ordered list of references with id lookups."""

from collections.abc import Iterable, Iterator
from typing import NamedTuple

from apiref_codegen.parser.base import (
    EnumReference,
    Reference,
    RequestReference,
    TypeField,
)


class Children(NamedTuple):
    requests: list[RequestReference]
    enum: EnumReference | None


class ReferenceGraph:
    """Read-only view over every extracted reference.

    Lookups are linear scans; a documentation site is small enough that an
    index is not worth keeping in sync.
    """

    def __init__(self, references: Iterable[Reference]):
        self.references: list[Reference] = list(references)

    def __iter__(self) -> Iterator[Reference]:
        return iter(self.references)

    def __len__(self) -> int:
        return len(self.references)

    def find(self, reference_id: str) -> Reference | None:
        return next((r for r in self.references if r.id == reference_id), None)

    def children(self, reference_id: str) -> Children:
        """Requests owned by ``reference_id`` and its error enum, if any."""
        requests = []
        enum = None
        for reference in self.references:
            if reference.parent != reference_id:
                continue
            if reference.kind == "request":
                requests.append(reference)
            elif reference.kind == "enum" and enum is None:
                enum = reference
        return Children(requests, enum)


def merge_fields(fields: Iterable[TypeField]) -> list[TypeField]:
    """Collapse fields sharing a name into one, keeping first-seen order.

    Descriptions are joined with a newline, the candidate types are unioned
    and the result is required only if every occurrence was.
    """
    merged: dict[str, TypeField] = {}
    for field in fields:
        existing = merged.get(field.name)
        if existing is None:
            merged[field.name] = field
            continue

        descriptions = [d for d in (existing.description, field.description) if d]
        types = list(existing.types)
        types.extend(t for t in field.types if t not in types)
        merged[field.name] = TypeField(
            name=field.name,
            types=types,
            required=existing.required and field.required,
            description="\n".join(descriptions),
        )
    return list(merged.values())
