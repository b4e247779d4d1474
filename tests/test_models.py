import json

import pytest
from pydantic import ValidationError

from apiref_codegen.parser.base import (
    ApiMeta,
    ApiParam,
    DocNode,
    EnumReference,
    RequestReference,
    TypeField,
    TypeNode,
    TypeReference,
    dump_references,
    load_references,
)


class TestDocNode:
    def test_minimal_node_defaults(self):
        node = DocNode(title="Overview", slug="overview", type="basic")
        assert node.body == ""
        assert node.api is None
        assert node.children == []

    def test_param_location_uses_in_key(self):
        param = ApiParam.model_validate({"name": "id", "type": "string", "in": "path"})
        assert param.location == "path"
        assert param.required is False

    def test_null_param_values_use_defaults(self):
        param = ApiParam.model_validate({"name": "id", "type": None, "in": "query", "required": None, "desc": None})
        assert param.type == ""
        assert param.required is False
        assert param.desc == ""
        assert ApiMeta.model_validate({"method": "get", "url": "/x", "params": None}).params == []

    def test_nested_children_and_unknown_keys(self):
        node = DocNode.model_validate({
            "title": "Customer Object",
            "slug": "customer-object",
            "type": "basic",
            "hidden": False,
            "children": [{"title": "Customer Errors", "slug": "customer-errors", "type": "basic"}],
        })
        assert node.children[0].slug == "customer-errors"


class TestTypeNode:
    def test_serializes_camel_case_and_omits_unset(self):
        node = TypeNode(type="array", array_types=[TypeNode(type="string", starts_with="cus_")])
        data = node.model_dump(by_alias=True, exclude_none=True)
        assert data == {"type": "array", "arrayTypes": [{"type": "string", "startsWith": "cus_"}]}

    def test_field_types_use_type_key(self):
        field = TypeField.model_validate({"name": "id", "type": [{"type": "string"}]})
        assert field.types == [TypeNode(type="string")]
        assert field.required is True


class TestReferences:
    def test_interchange_keeps_kind_specific_payload(self):
        references = [
            TypeReference(product="collect", id="customer-object", name="Customer",
                          fields=[TypeField(name="id", types=[TypeNode(type="string")])]),
            EnumReference(product="collect", parent="customer-object", id="customer-errors",
                          name="CustomerError"),
            RequestReference(product="collect", parent="customer-object", id="retrieve-customer",
                             name="RetrieveCustomerRequest", method="GET", path="/v1/customers/{customer}"),
        ]
        text = dump_references(references)
        data = json.loads(text)
        assert [item["kind"] for item in data] == ["type", "enum", "request"]
        assert "parent" not in data[0]
        assert data[0]["fields"][0]["type"] == [{"type": "string"}]

        loaded = load_references(text)
        assert isinstance(loaded[1], EnumReference)
        assert isinstance(loaded[2], RequestReference)
        assert loaded[2].path == "/v1/customers/{customer}"

    def test_unknown_kind_is_rejected(self):
        with pytest.raises(ValidationError):
            load_references('[{"kind": "webhook", "product": "p", "id": "x", "name": "X"}]')
