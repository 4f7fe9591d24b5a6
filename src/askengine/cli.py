"""askengine CLI entry point."""

import asyncio
import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from askengine import settings
from askengine.engines import AnthropicEngine
from askengine.errors import EngineError
from askengine.models import CONTEXT_SIZES, DEFAULT_CONTEXT_SIZE, MODEL_ALIASES
from askengine.prompts import Prompt
from askengine.transport import AnthropicTransport

console = Console()


def _engine_kwargs(model, temperature, max_tokens):
    """Collect only the overrides the user actually gave."""
    kwargs = {}
    if model:
        kwargs["model"] = model
    elif settings.get_setting("model"):
        kwargs["model"] = settings.get_setting("model")
    if temperature is not None:
        kwargs["temperature"] = temperature
    if max_tokens is not None:
        kwargs["max_tokens_to_sample"] = max_tokens
    return kwargs


def load_prompts(path: Path) -> list[tuple[Prompt, dict]]:
    """Load ``{"template", "inputs"}`` JSONL lines into (prompt, inputs) pairs."""
    pairs = []
    for line in path.read_text().strip().split("\n"):
        if line.strip():
            data = json.loads(line)
            pairs.append((Prompt(template=data["template"]), data.get("inputs", {})))
    return pairs


@click.group()
@click.version_option()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose):
    """askengine: ask hosted LLMs questions through a uniform engine."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )


@cli.command()
@click.argument("question")
@click.option("--model", default=None, help="Model ID or alias (e.g., claude-2, opus)")
@click.option("--temperature", type=float, default=None, help="Sampling temperature")
@click.option("--max-tokens", type=int, default=None, help="Maximum tokens to sample")
@click.option("--api-key", default=None, help="API key (or set ANTHROPIC_API_KEY)")
def ask(question, model, temperature, max_tokens, api_key):
    """Ask a single question and print the answer."""
    engine = AnthropicEngine(**_engine_kwargs(model, temperature, max_tokens))
    try:
        answer = asyncio.run(_ask_async(engine, question, api_key))
    except EngineError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    console.print(answer, markup=False, highlight=False)


async def _ask_async(engine, question, api_key):
    async with engine:
        return await engine.run(question, anthropic_api_key=api_key)


@cli.command()
@click.argument("prompts_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", type=click.Path(), default=None, help="Write results JSON here")
@click.option("--stop", multiple=True, help="Stop sequence (repeatable)")
@click.option("--model", default=None, help="Model ID or alias")
@click.option("--temperature", type=float, default=None, help="Sampling temperature")
@click.option("--max-tokens", type=int, default=None, help="Maximum tokens to sample")
@click.option("--api-key", default=None, help="API key (or set ANTHROPIC_API_KEY)")
def generate(prompts_file, output, stop, model, temperature, max_tokens, api_key):
    """Run every prompt in a JSONL file and collect the generations."""
    kwargs = _engine_kwargs(model, temperature, max_tokens)
    asyncio.run(_generate_async(Path(prompts_file), output, list(stop) or None, api_key, kwargs))


async def _generate_async(prompts_file, output, stop, api_key, kwargs):
    """Async implementation of generate command."""
    try:
        prompts = load_prompts(prompts_file)
    except (json.JSONDecodeError, KeyError) as e:
        console.print(f"[red]Invalid prompts file {prompts_file}: {e}[/red]")
        sys.exit(1)

    if not prompts:
        console.print("[yellow]No prompts found.[/yellow]")
        return

    try:
        transport = AnthropicTransport(api_key=settings.resolve_api_key(anthropic_api_key=api_key))
    except EngineError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    try:
        engine = AnthropicEngine(transport=transport, **kwargs)
        with console.status(f"[cyan]Generating {len(prompts)} prompt(s) with {engine.model_name}..."):
            result = await engine.generate(prompts, stop=stop)
    except EngineError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    finally:
        await transport.aclose()

    payload = result.model_dump_json(indent=2)
    if output:
        Path(output).write_text(payload)
        console.print(f"[green]✓[/green] {len(result.generations)} result(s) saved to: {output}")
    else:
        click.echo(payload)


@cli.command()
def models():
    """List known models and their context sizes."""
    aliases = {}
    for alias, target in MODEL_ALIASES.items():
        aliases.setdefault(target, []).append(alias)

    table = Table(title="Models")
    table.add_column("Model")
    table.add_column("Context", justify="right")
    table.add_column("Aliases")
    for model_id, size in sorted(CONTEXT_SIZES.items()):
        table.add_row(model_id, f"{size:,}", ", ".join(aliases.get(model_id, [])))
    console.print(table)
    console.print(f"Unknown models assume a context of {DEFAULT_CONTEXT_SIZE:,} tokens.")


@cli.command()
@click.option("--set-key", "set_key", default=None, help="Store an Anthropic API key")
@click.option("--model", default=None, help="Default model for ask/generate")
@click.option("--log-prompts/--no-log-prompts", default=None, help="Log formatted prompts")
@click.option("--show", is_flag=True, help="Show current config")
def config(set_key, model, log_prompts, show):
    """Configure stored defaults."""
    if show:
        cfg = settings.load_config() or {}
        key = cfg.get("anthropic_api_key")
        key_preview = key[:12] + "..." if key else "not set"
        console.print(f"anthropic_api_key: {key_preview}")
        console.print(f"model: {cfg.get('model', 'claude-2 (default)')}")
        console.print(f"log_prompts: {cfg.get('log_prompts', False)}")
        return

    if set_key is None and model is None and log_prompts is None:
        console.print("Use --show, --set-key, --model, or --log-prompts/--no-log-prompts")
        return

    if set_key is not None:
        settings.update_config("anthropic_api_key", set_key)
        console.print("API key saved")
    if model is not None:
        settings.update_config("model", model)
        console.print(f"Default model set to: {model}")
    if log_prompts is not None:
        settings.update_config("log_prompts", log_prompts)
        console.print(f"log_prompts set to: {log_prompts}")


if __name__ == "__main__":
    cli()
