import pytest

from apiref_codegen.parser.base import DocNode

from docs_data import customer_docs_data


@pytest.fixture
def customer_docs() -> list[DocNode]:
    return [DocNode.model_validate(item) for item in customer_docs_data()]
