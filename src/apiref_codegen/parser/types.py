"""Type inference from raw type tokens and prose descriptions.

Reference docs give each field a loose type token ("string", "array of
objects", "string or integer") plus a free-text description. The token picks
the base type; a handful of independent matchers then look for specific
textual anchors in the description and refine the string or object node.
A description none of them recognize leaves the bare type untouched.
"""

import re

from .base import TypeField, TypeNode

TYPE_ALIASES = {
    "float": "number",
    "Boolean": "boolean",
    "int": "number",
    "integer": "number",
}

ARRAY_SENTINELS = {
    "array_string": "string",
    "array_object": "object",
}

STARTS_WITH_RE = re.compile(r"starting with \*\*(\w+)\*\*")
BOLD_BULLET_RE = re.compile(r"^(\\\*|\*|-)\s*\*\*([\w\s]+)\*\*")
CODE_BULLET_RE = re.compile(r"^(\\\*|\*|-)\s*`([\w\s]+)`")
OBJECT_REF_RE = re.compile(r"see \[([\w\s]+)\]\(ref:([\w-]+)\)", re.IGNORECASE)


def _alias(type_name: str) -> str:
    type_name = type_name.strip()
    if not type_name:
        return "unknown"
    return TYPE_ALIASES.get(type_name, type_name)


def parse_raw_type(raw_type: str) -> list[TypeNode]:
    """Map a raw type token to one node, or several for "A or B" unions."""
    if "array of" in raw_type or "list of" in raw_type:
        element = raw_type.split()[-1]
        if element.endswith("s"):
            element = element[:-1]
        return [TypeNode(type="array", array_types=[TypeNode(type=_alias(element))])]

    if raw_type in ARRAY_SENTINELS:
        return [TypeNode(type="array", array_types=[TypeNode(type=ARRAY_SENTINELS[raw_type])])]

    if " or " in raw_type:
        return [TypeNode(type=_alias(name)) for name in raw_type.split(" or ")]

    return [TypeNode(type=_alias(raw_type))]


def find_type(types: list[TypeNode], of_type: str) -> TypeNode | None:
    """Depth-first search for the first node of ``of_type``, looking inside arrays."""
    for node in types:
        if node.type == of_type:
            return node
    for node in types:
        if node.type == "array" and node.array_types:
            found = find_type(node.array_types, of_type)
            if found:
                return found
    return None


def _bullet_tokens(description: str, pattern: re.Pattern) -> list[str]:
    tokens = []
    for line in description.split("\n"):
        match = pattern.match(line)
        if match:
            tokens.append(match.group(2).strip())
    return tokens


def match_starts_with(node: TypeNode, description: str) -> None:
    match = STARTS_WITH_RE.search(description)
    if match:
        node.starts_with = match.group(1)


def match_possible_values(node: TypeNode, description: str) -> None:
    if "of the following" not in description and "ossible values" not in description:
        return
    values = _bullet_tokens(description, BOLD_BULLET_RE)
    if values:
        node.possible_values = values


def match_object_fields(node: TypeNode, description: str) -> None:
    # Nested field types are not described in prose, so they stay unknown.
    if "the following fields" not in description:
        return
    names = _bullet_tokens(description, CODE_BULLET_RE)
    if names:
        node.fields = [TypeField(name=name, types=[TypeNode(type="unknown")]) for name in names]


def match_object_reference(node: TypeNode, description: str) -> None:
    match = OBJECT_REF_RE.search(description)
    if match:
        node.id = match.group(2)


STRING_MATCHERS = (match_starts_with, match_possible_values)
OBJECT_MATCHERS = (match_object_fields, match_object_reference)


def infer_types(raw_type: str, description: str = "") -> list[TypeNode]:
    """Infer the type nodes of a documented field.

    Returns a non-empty list; more than one node only for "A or B" unions.
    """
    types = parse_raw_type(raw_type or "")
    description = description or ""

    string_type = find_type(types, "string")
    if string_type:
        for matcher in STRING_MATCHERS:
            matcher(string_type, description)

    object_type = find_type(types, "object")
    if object_type:
        for matcher in OBJECT_MATCHERS:
            matcher(object_type, description)

    return types
