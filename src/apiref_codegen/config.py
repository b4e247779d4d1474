"""Configuration files and defaults.

Both the product list and the fixes overlay may be written as YAML or JSON;
YAML's loader accepts either.
"""

from pathlib import Path

import yaml
from pydantic import BaseModel, ValidationError

DEFAULT_REFERENCES_FILE = "references.json"
DEFAULT_CLIENT_NAME = "RapydClient"
# Relative to the output root.
DEFAULT_CLIENT_PATH = "../core/RapydClient"
DEFAULT_TITLE_SUFFIXES = ("Collect", "Disburse", "Wallet", "Issuing")
DEFAULT_WORKERS = 8


class ConfigError(ValueError):
    """Raised when a configuration file is missing or malformed."""


class ProductSource(BaseModel):
    """A product grouping and the documentation pages that describe it."""

    id: str
    urls: list[str]


def _load(file_path: Path):
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {file_path}: {e}") from e
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Cannot parse {file_path}: {e}") from e


def load_products(file_path: Path) -> list[ProductSource]:
    """Load the list of products to extract.

    Accepts either a list of ``{id, urls}`` entries or a mapping with a
    ``products`` key holding that list.
    """
    data = _load(file_path)
    if isinstance(data, dict):
        data = data.get("products")
    if not isinstance(data, list):
        raise ConfigError(f"{file_path}: expected a list of products")
    try:
        return [ProductSource(**item) for item in data]
    except (TypeError, ValidationError) as e:
        raise ConfigError(f"{file_path}: invalid product entry: {e}") from e


def load_fixes(file_path: Path | None) -> dict[str, dict]:
    """Load the manual override overlay, keyed by reference id."""
    if file_path is None:
        return {}
    data = _load(file_path)
    if data is None:
        return {}
    if not isinstance(data, dict) or not all(isinstance(v, dict) for v in data.values()):
        raise ConfigError(f"{file_path}: expected a mapping of reference id to patch object")
    return data
