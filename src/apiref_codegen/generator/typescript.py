"""TypeScript generator: renders the reference graph into declaration files.

Every reference becomes one file under ``<product>/<kind>s/<Name>.ts``; every
type that owns requests or an error enum also gets an API module under
``<product>/apis/<Type>.ts`` with one client function per request.
"""

import posixpath
import re
from collections.abc import Iterable

from apiref_codegen.config import DEFAULT_CLIENT_NAME, DEFAULT_CLIENT_PATH
from apiref_codegen.graph import ReferenceGraph, merge_fields
from apiref_codegen.parser.base import (
    EnumReference,
    Reference,
    RequestReference,
    TypeField,
    TypeNode,
    TypeReference,
)

IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][\w$]*$")
PATH_PLACEHOLDER_RE = re.compile(r"\{(\w+)\}")


def reference_path(reference: Reference) -> str:
    return posixpath.join(reference.product, reference.kind + "s", reference.name + ".ts")


def api_path(reference: TypeReference) -> str:
    return posixpath.join(reference.product, "apis", reference.name + ".ts")


def relative_import(from_dir: str, target: str) -> str:
    """Import specifier for ``target`` as seen from a file in ``from_dir``.

    Both paths are relative to the output root; ``.ts`` is dropped.
    """
    # Anchor below enough dummy segments that leading ".." never escapes "/".
    anchor = "/_" * (target.count("..") + from_dir.count("..") + 1)
    path = posixpath.relpath(posixpath.join(anchor, target), posixpath.join(anchor, from_dir))
    if path.endswith(".ts"):
        path = path[:-3]
    if not path.startswith("."):
        path = "./" + path
    return path


def format_property(name: str) -> str:
    return name if IDENTIFIER_RE.match(name) else f"'{name}'"


def format_access(name: str) -> str:
    return f"request.{name}" if IDENTIFIER_RE.match(name) else f"request['{name}']"


def format_description(description: str, indent: str = "  ") -> str:
    """Render a description as a doc comment; ``\\*`` bullets become dashes."""
    text = description.replace("\\*", "-").replace("*/", "*\\/")
    lines = [f"{indent}/**"]
    lines.extend(f"{indent} * {line}".rstrip() for line in text.split("\n"))
    lines.append(f"{indent} */")
    return "\n".join(lines) + "\n"


def external_ids(types: Iterable[TypeNode]) -> list[str]:
    """Ids of named objects referenced by ``types``, looking inside arrays."""
    ids = []
    for node in types:
        if node.id:
            ids.append(node.id)
        if node.type == "array" and node.array_types:
            ids.extend(external_ids(node.array_types))
    return ids


class TypeScriptGenerator:
    """Generates TypeScript interfaces, enums and API functions from references."""

    def __init__(self, graph: ReferenceGraph, client_name: str = DEFAULT_CLIENT_NAME,
                 client_path: str = DEFAULT_CLIENT_PATH):
        self.graph = graph
        self.client_name = client_name
        self.client_path = client_path

    def generate(self) -> dict[str, str]:
        """Render every reference.

        Returns dict of {path: content} with paths relative to the output
        root, like 'collect/types/Customer.ts'.
        """
        files: dict[str, str] = {}
        for reference in self.graph:
            if isinstance(reference, TypeReference):
                files[reference_path(reference)] = self._render_interface(reference, reference.fields)
                requests, enum = self.graph.children(reference.id)
                if requests or enum:
                    files[api_path(reference)] = self._render_api(reference, requests, enum)
            elif isinstance(reference, EnumReference):
                files[reference_path(reference)] = self._render_enum(reference)
            elif isinstance(reference, RequestReference):
                fields = [*reference.params, *reference.body, *reference.query, *reference.headers]
                files[reference_path(reference)] = self._render_interface(reference, fields)
        return files

    # -- type rendering -------------------------------------------------------

    def format_type(self, types: list[TypeNode]) -> str:
        return " | ".join(self._format_node(node) for node in types)

    def _format_node(self, node: TypeNode) -> str:
        if node.type == "string":
            if node.starts_with:
                return f"`{node.starts_with}${{string}}`"
            if node.possible_values:
                return " | ".join(f"'{value}'" for value in node.possible_values)
            return "string"
        if node.type == "object":
            if node.fields:
                members = "; ".join(
                    f"{format_property(field.name)}: {self.format_type(field.types)}"
                    for field in node.fields
                )
                return "{ " + members + " }"
            if node.id:
                target = self.graph.find(node.id)
                if target:
                    return f"Partial<{target.name}>"
            return "object"
        if node.type in ("number", "boolean"):
            return node.type
        if node.type == "array":
            if node.array_types:
                return f"({self.format_type(node.array_types)})[]"
            return "any[]"
        return "unknown"

    # -- declarations ---------------------------------------------------------

    def _render_imports(self, reference: Reference, fields: list[TypeField]) -> str:
        own_path = reference_path(reference)
        imports: list[str] = []
        for field in fields:
            for reference_id in external_ids(field.types):
                target = self.graph.find(reference_id)
                if target is None:
                    continue
                target_path = reference_path(target)
                if target_path == own_path:
                    continue
                import_path = relative_import(posixpath.dirname(own_path), target_path)
                line = f"import {{ {target.name} }} from '{import_path}';"
                if line not in imports:
                    imports.append(line)
        if not imports:
            return ""
        return "\n".join(imports) + "\n\n"

    def _render_interface(self, reference: Reference, fields: list[TypeField]) -> str:
        contents = self._render_imports(reference, fields)
        contents += f"export interface {reference.name} {{\n"
        for field in merge_fields(fields):
            if field.description:
                contents += format_description(field.description)
            optional = "" if field.required else "?"
            contents += f"  {format_property(field.name)}{optional}: {self.format_type(field.types)};\n"
        contents += "}\n"
        return contents

    def _render_enum(self, reference: EnumReference) -> str:
        contents = f"export enum {reference.name} {{\n"
        for value in reference.values:
            if value.description:
                contents += format_description(value.description)
            contents += f"  {value.name} = '{value.name}',\n"
        contents += "}\n"
        return contents

    # -- API modules ----------------------------------------------------------

    def _render_api(self, reference: TypeReference, requests: list[RequestReference],
                    enum: EnumReference | None) -> str:
        client_import = relative_import(posixpath.join(reference.product, "apis"), self.client_path)
        lines = [
            f"import {{ {self.client_name} }} from '{client_import}';",
            f"import {{ {reference.name} }} from '../types/{reference.name}';",
        ]
        if enum:
            lines.append(f"import {{ {enum.name} }} from '../enums/{enum.name}';")
        for request in requests:
            lines.append(f"import {{ {request.name} }} from '../requests/{request.name}';")

        contents = "\n".join(lines) + "\n"
        error_kind = enum.name if enum else "Error"
        for request in requests:
            contents += "\n" + self._render_function(reference, request, error_kind)
        return contents

    def _render_function(self, reference: TypeReference, request: RequestReference, error_kind: str) -> str:
        function_name = function_name_for(request)
        path_params: list[str] = []

        def placeholder(match: re.Match) -> str:
            path_params.append(match.group(1))
            return "{}"

        path = PATH_PLACEHOLDER_RE.sub(placeholder, request.path)

        contents = (
            f"export async function {function_name}(client: {self.client_name}, "
            f"request: {request.name}): Promise<{reference.name}> {{\n"
        )

        if request.query:
            if len(request.query) > 1:
                entries = "".join(
                    f"\n    {format_property(query.name)}: {format_access(query.name)},"
                    for query in request.query
                )
                contents += f"  const queryParams = client.queryParams({{{entries}\n  }});\n"
            else:
                query = request.query[0]
                contents += (
                    f"  const queryParams = client.queryParams("
                    f"{{ {format_property(query.name)}: {format_access(query.name)} }});\n"
                )

        call = f"  const response = await client.{request.method.lower()}('{path}'"
        if request.query:
            call += " + queryParams"
        for param in path_params:
            call += f", {format_access(param)}"
        if request.body:
            call += ", {\n"
            for param in request.body:
                call += f"    {format_property(param.name)}: {format_access(param.name)},\n"
            call += "  }"
        contents += call + ");\n"

        contents += f"  return await response.data<{reference.name}, {error_kind}>();\n"
        contents += "}\n"
        return contents


def function_name_for(request: RequestReference) -> str:
    """``GetCustomerRequest`` -> ``getCustomer``."""
    name = re.sub(r"Request$", "", request.name)
    return name[:1].lower() + name[1:]
