"""Documentation source: fetching reference pages and collecting references.

Reference pages embed their whole docs tree as JSON in the ``data-json``
attribute of the ``#readme-data-docs`` element.
"""

import json
import logging
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor

import requests
from bs4 import BeautifulSoup
from pydantic import ValidationError

from apiref_codegen.config import DEFAULT_WORKERS, ProductSource

from .base import DocNode, Reference
from .extract import ReferenceExtractor

logger = logging.getLogger(__name__)

DOCS_ELEMENT_ID = "readme-data-docs"
DEFAULT_TIMEOUT = 30


class DocsFormatError(ValueError):
    """Raised when a page does not carry a readable docs tree."""


def parse_docs_html(html: str) -> list[DocNode]:
    """Extract the documentation node tree embedded in a reference page."""
    soup = BeautifulSoup(html, "html.parser")
    element = soup.find(id=DOCS_ELEMENT_ID)
    if element is None:
        raise DocsFormatError(f"no #{DOCS_ELEMENT_ID} element")

    raw = element.get("data-json")
    if not raw:
        raise DocsFormatError(f"#{DOCS_ELEMENT_ID} has no data-json attribute")
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise DocsFormatError(f"invalid docs JSON: {e}") from e
    if not isinstance(data, list):
        raise DocsFormatError("docs JSON is not a list")

    nodes = []
    for item in data:
        try:
            nodes.append(DocNode.model_validate(item))
        except ValidationError as e:
            title = item.get("title") if isinstance(item, dict) else None
            logger.warning("Skipping malformed documentation node %r: %s", title, e)
    return nodes


def fetch_docs(url: str, session: requests.Session | None = None, timeout: float = DEFAULT_TIMEOUT) -> list[DocNode]:
    """Download a reference page and return its documentation nodes."""
    http = session or requests
    response = http.get(url, timeout=timeout)
    response.raise_for_status()
    return parse_docs_html(response.text)


def unique_references(references: Iterable[Reference]) -> list[Reference]:
    """Keep the first reference for every id; later duplicates are dropped."""
    seen: set[str] = set()
    result = []
    for reference in references:
        if reference.id in seen:
            logger.warning("Duplicate reference id %r, keeping the first one.", reference.id)
            continue
        seen.add(reference.id)
        result.append(reference)
    return result


def collect_references(
    products: list[ProductSource],
    extractor: ReferenceExtractor,
    fetch: Callable[[str], list[DocNode]] | None = None,
    max_workers: int = DEFAULT_WORKERS,
) -> list[Reference]:
    """Fetch and extract every product page concurrently.

    Results are merged in product/url order, so identical input gives an
    identical reference list. A page that fails to load is logged and left
    out; the others still contribute.
    """
    fetch = fetch or fetch_docs
    jobs = [(product.id, url) for product in products for url in product.urls]

    def run(job: tuple[str, str]) -> list[Reference]:
        product_id, url = job
        try:
            nodes = fetch(url)
        except (requests.RequestException, DocsFormatError) as e:
            logger.warning("Failed to load %s: %s", url, e)
            return []
        logger.info("Loaded %d documentation nodes from %s", len(nodes), url)

        references: list[Reference] = []
        for node in nodes:
            references.extend(extractor.extract(product_id, node))
        return references

    if not jobs:
        return []
    with ThreadPoolExecutor(max_workers=max(1, max_workers)) as pool:
        results = list(pool.map(run, jobs))

    return unique_references(reference for batch in results for reference in batch)
