"""Command line interface for the workspace tree renderer."""
from __future__ import annotations

import uuid
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Optional

import click

from ai_workspace_tree.core.utils.config import ConfigError, Settings, load_settings
from ai_workspace_tree.core.utils.dir_tree import (
    PathNotFoundError,
    list_dir_tree,
    options_from_settings,
)
from ai_workspace_tree.core.utils.logger import configure_logging, get_logger, set_correlation_id
from ai_workspace_tree.providers.models import ModelRegistry, UnknownModelError, build_model_registry

LOGGER = get_logger(__name__)


def _build_context(settings: Settings) -> Dict[str, Any]:
    return {
        "settings": settings,
        "models": build_model_registry(settings),
    }


def _yes_no(value: bool) -> str:
    return "yes" if value else "no"


@click.group()
@click.option("--config", "config_path", type=click.Path(path_type=Path), help="Path to config file.")
@click.option("--verbose", is_flag=True, help="Enable verbose logging output.")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, verbose: bool) -> None:
    """Render compact workspace trees for LLM prompts."""
    try:
        settings = load_settings(config_path)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    if verbose:
        settings.log_level = "DEBUG"
    configure_logging(settings.log_level, structured=settings.structured_logging)
    set_correlation_id(uuid.uuid4().hex[:12])
    ctx.obj = _build_context(settings)


@cli.command()
@click.argument("path", required=False, type=click.Path(path_type=Path))
@click.option("--threshold", type=click.IntRange(min=0), default=None, help="Max children before a directory is collapsed.")
@click.option("--include-hidden/--no-include-hidden", default=None, help="Show entries starting with '.'.")
@click.option("--count-files-only/--count-all", default=None, help="Only count files toward the threshold.")
@click.option("--sort/--no-sort", "sort_entries", default=None, help="Sort directories first, then by name.")
@click.pass_context
def tree(
    ctx: click.Context,
    path: Optional[Path],
    threshold: Optional[int],
    include_hidden: Optional[bool],
    count_files_only: Optional[bool],
    sort_entries: Optional[bool],
) -> None:
    """Print the directory tree for PATH (defaults to the workspace root)."""
    settings: Settings = ctx.obj["settings"]
    options = options_from_settings(settings)
    overrides = {
        "threshold": threshold,
        "include_hidden": include_hidden,
        "count_files_only": count_files_only,
        "sort_entries": sort_entries,
    }
    options = replace(options, **{key: value for key, value in overrides.items() if value is not None})

    root = path if path is not None else settings.workspace_root
    try:
        lines = list_dir_tree(root, options)
    except PathNotFoundError as exc:
        raise click.ClickException(str(exc)) from exc
    LOGGER.debug("Rendered %d line(s) for %s", len(lines), root)
    click.echo("\n".join(lines))


@cli.group()
def models() -> None:
    """Inspect the model registry."""


@models.command("list")
@click.pass_context
def list_models(ctx: click.Context) -> None:
    """List built-in and custom models."""
    registry: ModelRegistry = ctx.obj["models"]
    for key, model in registry.models().items():
        origin = "builtin" if registry.is_builtin(key) else "custom"
        click.echo(
            f"{key}\t{model.provider}\t{registry.resolve_api_model_name(key)}\t{origin}"
            f"\treasoning={_yes_no(registry.supports_reasoning(key))}"
            f"\textended_thinking={_yes_no(registry.supports_extended_thinking(key))}"
        )


@models.command("show")
@click.argument("key", required=False)
@click.option("--strict", is_flag=True, help="Fail instead of guessing for unregistered models.")
@click.pass_context
def show_model(ctx: click.Context, key: Optional[str], strict: bool) -> None:
    """Show how KEY (default: the configured model) resolves, including fallbacks."""
    registry: ModelRegistry = ctx.obj["models"]
    if key is None:
        key = ctx.obj["settings"].model
    if strict:
        try:
            registry.require(key)
        except UnknownModelError as exc:
            raise click.ClickException(str(exc)) from exc

    model = registry.get(key)
    click.echo(f"key: {key}")
    click.echo(f"registered: {_yes_no(model is not None)}")
    click.echo(f"api_name: {registry.resolve_api_model_name(key)}")
    click.echo(f"provider: {registry.get_model_provider(key)}")
    click.echo(f"reasoning: {_yes_no(registry.supports_reasoning(key))}")
    click.echo(f"extended_thinking: {_yes_no(registry.supports_extended_thinking(key))}")
    click.echo(f"streaming: {_yes_no(registry.supports_streaming(key))}")
    if model is not None and model.context_window_tokens:
        click.echo(f"context_window_tokens: {model.context_window_tokens}")
    if model is not None and model.compaction_target_tokens:
        click.echo(f"compaction_target_tokens: {model.compaction_target_tokens}")


def main() -> None:
    cli(prog_name="wstree")


__all__ = ["cli", "main", "tree", "models"]
