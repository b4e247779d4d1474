import pytest

from apiref_codegen.config import ConfigError, load_fixes, load_products


class TestLoadProducts:
    def test_yaml_list(self, tmp_path):
        f = tmp_path / "products.yaml"
        f.write_text(
            "- id: collect\n"
            "  urls:\n"
            "    - https://docs.example.com/reference/customer-object\n"
            "- id: wallet\n"
            "  urls: []\n"
        )
        products = load_products(f)
        assert [p.id for p in products] == ["collect", "wallet"]
        assert products[0].urls == ["https://docs.example.com/reference/customer-object"]

    def test_json_mapping_with_products_key(self, tmp_path):
        f = tmp_path / "products.json"
        f.write_text('{"products": [{"id": "collect", "urls": ["https://a"]}]}')
        assert load_products(f)[0].urls == ["https://a"]

    def test_invalid_entry(self, tmp_path):
        f = tmp_path / "products.yaml"
        f.write_text("- name: collect\n")
        with pytest.raises(ConfigError):
            load_products(f)

    def test_not_a_list(self, tmp_path):
        f = tmp_path / "products.yaml"
        f.write_text("collect: https://a\n")
        with pytest.raises(ConfigError):
            load_products(f)

    def test_unparseable(self, tmp_path):
        f = tmp_path / "products.yaml"
        f.write_text("- id: [unclosed\n")
        with pytest.raises(ConfigError):
            load_products(f)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_products(tmp_path / "missing.yaml")


class TestLoadFixes:
    def test_none(self):
        assert load_fixes(None) == {}

    def test_empty_file(self, tmp_path):
        f = tmp_path / "fixes.json"
        f.write_text("")
        assert load_fixes(f) == {}

    def test_mapping(self, tmp_path):
        f = tmp_path / "fixes.json"
        f.write_text('{"customer-object": {"name": "CustomerProfile"}}')
        assert load_fixes(f) == {"customer-object": {"name": "CustomerProfile"}}

    def test_values_must_be_objects(self, tmp_path):
        f = tmp_path / "fixes.json"
        f.write_text('{"customer-object": "CustomerProfile"}')
        with pytest.raises(ConfigError):
            load_fixes(f)
