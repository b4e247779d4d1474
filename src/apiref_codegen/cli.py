"""CLI entry point for apiref-codegen."""

import logging
from pathlib import Path

import click
from pydantic import ValidationError

from apiref_codegen.config import (
    DEFAULT_CLIENT_NAME,
    DEFAULT_CLIENT_PATH,
    DEFAULT_REFERENCES_FILE,
    DEFAULT_WORKERS,
    ConfigError,
    load_fixes,
    load_products,
)
from apiref_codegen.graph import ReferenceGraph
from apiref_codegen.generator.typescript import TypeScriptGenerator
from apiref_codegen.parser.base import Reference, dump_references, load_references
from apiref_codegen.parser.extract import ReferenceExtractor
from apiref_codegen.parser.source import collect_references


def _extract(products_path: Path, fixes_path: Path | None, workers: int) -> list[Reference]:
    try:
        products = load_products(products_path)
        fixes = load_fixes(fixes_path)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    urls = sum(len(p.urls) for p in products)
    click.echo(f"Fetching {urls} documentation pages for {len(products)} products...")
    extractor = ReferenceExtractor(fixes=fixes)
    try:
        return collect_references(products, extractor, max_workers=workers)
    except ValidationError as e:
        raise click.ClickException(f"Invalid override in {fixes_path}: {e}") from e


def _write_references(references: list[Reference], path: Path) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dump_references(references), encoding="utf-8")
    except OSError as e:
        raise click.ClickException(f"Cannot write {path}: {e}") from e
    click.echo(f"Saved {len(references)} references to {path}")


def _read_references(path: Path) -> list[Reference]:
    try:
        return load_references(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise click.ClickException(f"Cannot read {path}: {e}") from e
    except ValidationError as e:
        raise click.ClickException(f"Invalid references file {path}: {e}") from e


def _generate(references: list[Reference], output: Path, client_name: str, client_path: str) -> None:
    gen = TypeScriptGenerator(ReferenceGraph(references), client_name=client_name, client_path=client_path)
    files = gen.generate()

    for filename, content in files.items():
        file_path = output / filename
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise click.ClickException(f"Cannot write {file_path}: {e}") from e
        click.echo(f"  Created {file_path}")

    click.echo(f"Generated {len(files)} files in {output}")


client_options = [
    click.option("--client-name", default=DEFAULT_CLIENT_NAME, show_default=True, help="Class name of the HTTP client used by API modules."),
    click.option("--client-path", default=DEFAULT_CLIENT_PATH, show_default=True, help="Client module path, relative to the output directory."),
]


def with_client_options(func):
    for option in reversed(client_options):
        func = option(func)
    return func


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging.")
def main(verbose: bool):
    """apiref-codegen: generate typed API clients from reference documentation."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("products_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", default=DEFAULT_REFERENCES_FILE, show_default=True, type=click.Path(path_type=Path), help="Output path for the references JSON.")
@click.option("--fixes", "fixes_path", default=None, type=click.Path(exists=True, dir_okay=False, path_type=Path), help="Manual overrides keyed by reference id.")
@click.option("--workers", default=DEFAULT_WORKERS, show_default=True, type=click.IntRange(min=1), help="Concurrent page downloads.")
def extract(products_path: Path, output: Path, fixes_path: Path | None, workers: int):
    """Extract references from the documentation pages listed in PRODUCTS_PATH."""
    references = _extract(products_path, fixes_path, workers)
    _write_references(references, output)


@main.command()
@click.argument("references_path", type=click.Path(dir_okay=False, path_type=Path))
@click.option("-o", "--output", required=True, type=click.Path(file_okay=False, path_type=Path), help="Output directory for generated sources.")
@with_client_options
def generate(references_path: Path, output: Path, client_name: str, client_path: str):
    """Generate TypeScript sources from a references JSON file."""
    click.echo(f"Reading references from {references_path}...")
    references = _read_references(references_path)
    click.echo(f"Found {len(references)} references.")
    _generate(references, output, client_name, client_path)


@main.command()
@click.argument("products_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", required=True, type=click.Path(file_okay=False, path_type=Path), help="Output directory for generated sources.")
@click.option("--references", "references_path", default=None, type=click.Path(dir_okay=False, path_type=Path), help="Where to save the references JSON (default: OUTPUT/references.json).")
@click.option("--fixes", "fixes_path", default=None, type=click.Path(exists=True, dir_okay=False, path_type=Path), help="Manual overrides keyed by reference id.")
@click.option("--workers", default=DEFAULT_WORKERS, show_default=True, type=click.IntRange(min=1), help="Concurrent page downloads.")
@with_client_options
def run(products_path: Path, output: Path, references_path: Path | None, fixes_path: Path | None,
        workers: int, client_name: str, client_path: str):
    """Full pipeline: fetch docs -> extract references -> generate sources."""
    # Step 1: Extract
    references = _extract(products_path, fixes_path, workers)
    _write_references(references, references_path or output / DEFAULT_REFERENCES_FILE)

    # Step 2: Generate, only once every page has been extracted
    click.echo("Generating sources...")
    _generate(references, output, client_name, client_path)
