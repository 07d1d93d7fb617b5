"""CLI entry point for openapi2bruno."""

from fnmatch import fnmatchcase
from pathlib import Path

import click

from openapi2bruno.config import GeneratorConfig, ResolvedConfig, load_config, merge_config, parse_base_url_options
from openapi2bruno.errors import ConversionError, UnsupportedVersionError
from openapi2bruno.generator.collection import CollectionWalker, safe_dir_name
from openapi2bruno.parser.base import ApiOperation, GeneratedFile, GenerationStats
from openapi2bruno.parser.openapi import load_document, parse_operations


def _resolve_config(
    config_path: Path | None,
    company: str | None,
    envs: tuple[str, ...],
    base_urls: tuple[str, ...],
    output: Path | None,
) -> ResolvedConfig:
    """CLI options, then config file, then defaults."""
    cli_layer = GeneratorConfig(
        company=company,
        environments=list(envs) or None,
        base_urls=parse_base_url_options(base_urls),
        output_dir=str(output) if output else None,
    )
    layers = [cli_layer]
    if config_path:
        layers.append(load_config(config_path))
    return merge_config(*layers)


def _filter_operations(operations: list[ApiOperation], patterns: tuple[str, ...]) -> list[ApiOperation]:
    """Keep operations matching any 'METHOD /path' or '/path' glob pattern."""
    if not patterns:
        return operations

    def _matches(op: ApiOperation, pattern: str) -> bool:
        method, sep, path = pattern.strip().partition(" ")
        if sep:
            return op.method.lower() == method.lower() and fnmatchcase(op.path, path.strip())
        return fnmatchcase(op.path, pattern.strip())

    return [op for op in operations if any(_matches(op, p) for p in patterns)]


def _write_files(root: Path, files: list[GeneratedFile], skip_existing: bool, quiet: bool) -> int:
    """Persist generated files under root. Returns the number written."""
    written = 0
    for generated in files:
        file_path = root / generated.path
        if skip_existing and file_path.exists():
            if not quiet:
                click.echo(f"  Skipped {file_path} (exists)")
            continue
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(generated.content, encoding="utf-8")
        written += 1
        if not quiet:
            click.echo(f"  Created {file_path}")
    return written


def _print_summary(stats: GenerationStats) -> None:
    click.secho(f"Collection: {stats.collection_name}", bold=True)
    for group, count in stats.group_counts.items():
        click.echo(f"  {group}: {count}")
    click.echo(f"Operations: {stats.total_operations}  Environments: {stats.environment_count}")
    for warning in stats.warnings:
        click.secho(f"Warning: {warning}", fg="yellow", err=True)


def _load(doc_path: Path) -> dict:
    try:
        return load_document(doc_path)
    except UnsupportedVersionError as e:
        raise click.ClickException(f"Unsupported version: {e.message}") from e
    except ConversionError as e:
        raise click.ClickException(e.message) from e


@click.group()
def main():
    """openapi2bruno: generate a Bruno request collection from an OpenAPI 3 document."""
    pass


@main.command()
@click.argument("doc_path", type=click.Path(path_type=Path))
@click.option("-o", "--output", default=None, type=click.Path(file_okay=False, path_type=Path), help="Directory the collection folder is created in.")
@click.option("-c", "--config", "config_path", default=None, type=click.Path(exists=True, dir_okay=False, path_type=Path), help="JSON config file.")
@click.option("--company", default=None, help="Company name used in the collection name.")
@click.option("-e", "--env", "envs", multiple=True, help="Environment to generate (repeatable).")
@click.option("--base-url", "base_urls", multiple=True, metavar="ENV=URL", help="Base URL override for one environment (repeatable).")
@click.option("--include", "includes", multiple=True, metavar="PATTERN", help="Only operations matching 'METHOD /path' or a path glob (repeatable).")
@click.option("--skip-existing", is_flag=True, default=False, help="Leave files that already exist untouched.")
@click.option("--dry-run", is_flag=True, default=False, help="List the files without writing them.")
@click.option("-q", "--quiet", is_flag=True, default=False, help="Only print the summary.")
def generate(
    doc_path: Path,
    output: Path | None,
    config_path: Path | None,
    company: str | None,
    envs: tuple[str, ...],
    base_urls: tuple[str, ...],
    includes: tuple[str, ...],
    skip_existing: bool,
    dry_run: bool,
    quiet: bool,
):
    """Generate request files and environments from an OpenAPI document."""
    try:
        config = _resolve_config(config_path, company, envs, base_urls, output)
    except ConversionError as e:
        raise click.ClickException(e.message) from e

    click.secho(f"Parsing {doc_path}...", fg="cyan")
    document = _load(doc_path)

    try:
        operations = _filter_operations(parse_operations(document), includes)
        click.echo(f"Found {len(operations)} operations.")
        files, stats = CollectionWalker(document, config).generate(operations)
    except ConversionError as e:
        raise click.ClickException(e.message) from e

    root = Path(config.output_dir) / safe_dir_name(stats.collection_name)
    if dry_run:
        for generated in files:
            click.echo(f"  {root / generated.path}")
        _print_summary(stats)
        click.secho("Dry run: nothing written.", fg="yellow")
        return

    written = _write_files(root, files, skip_existing, quiet)
    _print_summary(stats)
    click.secho(f"Done! Wrote {written} files to {root}", fg="green")


@main.command("list-operations")
@click.argument("doc_path", type=click.Path(path_type=Path))
def list_operations(doc_path: Path):
    """Print each operation with its resolved folder and file name."""
    document = _load(doc_path)
    try:
        operations = parse_operations(document)
    except ConversionError as e:
        raise click.ClickException(e.message) from e

    for op, identity, folder in CollectionWalker(document).identities(operations):
        click.echo(f"{op.method.upper():7} {op.path}  ->  {folder}/{identity.file_name}.bru")
