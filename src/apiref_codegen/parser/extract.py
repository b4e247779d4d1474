"""Reference extraction from documentation nodes.

Each node is first classified into a ``NodeKind`` from its tag and title;
only then is the matching extraction routine run. Extraction returns a fresh
list of references per call, children included, so callers merge results
instead of sharing an accumulator.
"""

import enum
import json
import logging
import re
from collections.abc import Iterable

from apiref_codegen.config import DEFAULT_TITLE_SUFFIXES

from .base import (
    DocNode,
    EnumReference,
    EnumValue,
    Reference,
    ReferenceAdapter,
    RequestReference,
    TypeField,
    TypeReference,
)
from .types import infer_types

logger = logging.getLogger(__name__)

TYPE_MARKER = "Object"
ERRORS_MARKER = "Errors"
SEQUENCE_MARKER = "Sequence"
WEBHOOK_MARKER = "Webhook"

REQUEST_SUFFIX = "Request"
ENUM_SUFFIX = "Error"

# Synthesized by the signing client, never supplied by callers.
EXCLUDED_HEADERS = frozenset({
    "access_key",
    "salt",
    "signature",
    "timestamp",
    "idempotency",
    "content-type",
    "content_type",
})

TYPE_TABLE_COLUMNS = ("name", "type", "description")

PARAMETERS_BLOCK_RE = re.compile(r"\[block:parameters\](.*?)\[/block\]", re.DOTALL)
ERROR_ENTRY_RE = re.compile(r"\*\*(\w+)\*\*\n(.*)\n")
PATH_PARAM_RE = re.compile(r":(\w+)")


class NodeKind(enum.Enum):
    TYPE_DEFINITION = "type_definition"
    ERROR_ENUM = "error_enum"
    ENDPOINT = "endpoint"
    SEQUENCE = "sequence"
    WEBHOOK = "webhook"
    UNRECOGNIZED = "unrecognized"


def classify(node: DocNode) -> NodeKind:
    """Decide what a documentation node describes from its tag and title."""
    if node.type == "endpoint":
        return NodeKind.ENDPOINT
    if node.type != "basic":
        return NodeKind.UNRECOGNIZED

    title = node.title
    if SEQUENCE_MARKER in title:
        return NodeKind.SEQUENCE
    if title.endswith(TYPE_MARKER):
        return NodeKind.TYPE_DEFINITION
    if title.endswith(ERRORS_MARKER):
        return NodeKind.ERROR_ENUM
    if title.startswith(WEBHOOK_MARKER):
        return NodeKind.WEBHOOK
    return NodeKind.UNRECOGNIZED


def type_name(title: str) -> str:
    return re.sub(rf"(\s|{TYPE_MARKER}$)", "", title)


def enum_name(title: str) -> str:
    return re.sub(rf"(\s|{ERRORS_MARKER}$)", "", title) + ENUM_SUFFIX


def request_name(title: str) -> str:
    """Build a request name, e.g. "Create a customer" -> "CreateACustomerRequest"."""
    words = " ".join(segment[0].upper() + segment[1:] for segment in title.split())
    return re.sub(r"[\s-]", "", words) + REQUEST_SUFFIX


def normalize_path(url: str) -> str:
    """Drop the query string and turn ``:param`` placeholders into ``{param}``."""
    path = url.split("?", 1)[0]
    return PATH_PARAM_RE.sub(r"{\1}", path)


def parse_type_table(block: dict) -> list[TypeField]:
    """Turn a parameters-block table (``{"data": {"row-col": value}}``) into fields."""
    rows: dict[int, dict[str, str]] = {}
    for location, value in block.get("data", {}).items():
        row, _, col = location.partition("-")
        if row == "h":
            continue
        try:
            row_index, col_index = int(row), int(col)
        except ValueError:
            continue
        if col_index >= len(TYPE_TABLE_COLUMNS):
            continue
        rows.setdefault(row_index, {})[TYPE_TABLE_COLUMNS[col_index]] = str(value)

    fields = []
    for row_index in sorted(rows):
        row = rows[row_index]
        name = row.get("name", "").replace("`", "").strip()
        if not name:
            continue
        description = row.get("description", "")
        fields.append(TypeField(
            name=name,
            types=infer_types(row.get("type", ""), description),
            required=True,
            description=description,
        ))
    return fields


def apply_fixes(reference: Reference, fixes: dict[str, dict]) -> Reference:
    """Shallow-merge the manual override for ``reference.id`` onto it.

    Only top-level keys are replaced; a patched ``fields`` list replaces the
    extracted one wholesale.
    """
    fix = fixes.get(reference.id)
    if not fix:
        return reference
    data = reference.model_dump(by_alias=True, exclude_none=True)
    data.update(fix)
    return ReferenceAdapter.validate_python(data)


class ReferenceExtractor:
    """Extracts typed references from documentation node trees."""

    def __init__(self, fixes: dict[str, dict] | None = None,
                 title_suffixes: Iterable[str] = DEFAULT_TITLE_SUFFIXES):
        self.fixes = fixes or {}
        suffixes = [re.escape(s) for s in title_suffixes]
        self._suffix_re = re.compile(rf" - ({'|'.join(suffixes)})") if suffixes else None

    def clean_title(self, title: str) -> str:
        """Strip product-name suffixes such as " - Collect" from a page title."""
        if self._suffix_re is None:
            return title
        return self._suffix_re.sub("", title)

    def extract(self, product: str, node: DocNode, parent: str | None = None) -> list[Reference]:
        """Extract the references described by ``node`` and its children.

        ``parent`` is the id of the owning type, if any.
        """
        node = node.model_copy(update={"title": self.clean_title(node.title)})
        kind = classify(node)
        references: list[Reference] = []

        if kind is NodeKind.TYPE_DEFINITION:
            reference = self._extract_type(product, node)
            if reference:
                references.append(reference)
            for child in node.children:
                references.extend(self.extract(product, child, parent=node.slug))
        elif kind is NodeKind.ERROR_ENUM:
            if parent:
                references.append(self._extract_errors(product, node, parent))
            else:
                logger.debug("Skipping error list %r without an owning type.", node.title)
        elif kind is NodeKind.ENDPOINT:
            if not parent:
                logger.debug("Skipping endpoint %r without an owning type.", node.title)
            elif node.api is None:
                logger.warning("Endpoint %r has no API metadata, skipping.", node.title)
            else:
                references.append(self._extract_request(product, node, parent))
        elif kind is NodeKind.UNRECOGNIZED:
            if node.type == "basic":
                logger.warning('Unknown reference type of "basic" with title "%s".', node.title)
            else:
                logger.warning('Unknown reference type of "%s" with title "%s".', node.type, node.title)

        return references

    def _finish(self, reference: Reference) -> Reference:
        return apply_fixes(reference, self.fixes)

    def _extract_type(self, product: str, node: DocNode) -> Reference | None:
        match = PARAMETERS_BLOCK_RE.search(node.body)
        if not match:
            logger.debug("Type %r has no parameters block.", node.title)
            return None
        try:
            block = json.loads(match.group(1))
        except json.JSONDecodeError as e:
            logger.warning("Malformed parameters block in %r: %s", node.title, e)
            return None
        if not isinstance(block, dict):
            logger.warning("Malformed parameters block in %r: not an object", node.title)
            return None
        if not isinstance(block.get("data", {}), dict):
            logger.warning("Malformed parameters block in %r: data is not an object", node.title)
            return None

        return self._finish(TypeReference(
            product=product,
            id=node.slug,
            name=type_name(node.title),
            description=node.excerpt,
            fields=parse_type_table(block),
        ))

    def _extract_errors(self, product: str, node: DocNode, parent: str) -> Reference:
        values = [
            EnumValue(name=name, description=description)
            for name, description in ERROR_ENTRY_RE.findall(node.body)
        ]
        return self._finish(EnumReference(
            product=product,
            parent=parent,
            id=node.slug,
            name=enum_name(node.title),
            description=node.excerpt,
            values=values,
        ))

    def _extract_request(self, product: str, node: DocNode, parent: str) -> Reference:
        api = node.api
        headers = [
            header for header in self._params_in(node, "header")
            if header.name.lower() not in EXCLUDED_HEADERS
        ]
        # Path params are documented as optional, but a path cannot omit them.
        params = [
            param.model_copy(update={"required": True})
            for param in self._params_in(node, "path")
        ]

        return self._finish(RequestReference(
            product=product,
            parent=parent,
            id=node.slug,
            name=request_name(node.title),
            description=node.excerpt,
            method=api.method.upper(),
            path=normalize_path(api.url),
            params=params,
            body=self._params_in(node, "body"),
            query=self._params_in(node, "query"),
            headers=headers,
        ))

    def _params_in(self, node: DocNode, location: str) -> list[TypeField]:
        return [
            TypeField(
                name=param.name,
                types=infer_types(param.type, param.desc),
                required=param.required,
                description=param.desc,
            )
            for param in node.api.params
            if param.location == location
        ]
