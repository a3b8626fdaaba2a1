"""CLI for registry-proxy."""

import dataclasses
from typing import Optional
from urllib.parse import urlencode

import typer
import uvicorn
from rich.console import Console

from . import config, executor, resolver, utils
from .app import create_app
from .config import SchemaMode
from .logs import setup_logging
from .pipeline import Pipeline
from .report import emit_result, print_kv
from .schema_loader import DocumentPayload

app = typer.Typer(help="Stateless GraphQL proxy for schema registry graphs")
schema_app = typer.Typer(help="Schema operations")
config_app = typer.Typer(help="Configuration file operations")
app.add_typer(schema_app, name="schema")
app.add_typer(config_app, name="config")

console = Console()


def _load_config(config_path: Optional[str], mode: Optional[str] = None) -> config.Config:
    cfg = config.load(config_path)
    if mode:
        cfg = dataclasses.replace(cfg, mode=config.parse_mode(mode))
    return cfg


def _target(graph: str, variant: Optional[str], hash_: Optional[str], api_key: Optional[str]) -> resolver.Target:
    """Resolve CLI arguments through the same rules as request URLs."""
    params = {"graph": graph, "variant": variant, "hash": hash_, "apiKey": api_key}
    query = urlencode({k: v for k, v in params.items() if v})
    return resolver.resolve(f"/?{query}")


def _fail(e: Exception) -> None:
    console.print(f"[red]Error: {e}[/red]")
    raise typer.Exit(1)


@app.command("serve")
def serve(
    host: Optional[str] = typer.Option(None, help="Bind address"),
    port: Optional[int] = typer.Option(None, help="Bind port"),
    mode: Optional[str] = typer.Option(None, help="Schema mode (introspection|document)"),
    config_path: Optional[str] = typer.Option(None, "--config", help="Config file path"),
):
    """Run the proxy HTTP server."""
    try:
        cfg = _load_config(config_path, mode)
        setup_logging(cfg.log_level)
        bind_host = host or cfg.host
        bind_port = port or cfg.port
        console.print(
            f"[cyan]Serving {cfg.mode.value} schemas from {cfg.registry_url} on http://{bind_host}:{bind_port}[/cyan]"
        )
        uvicorn.run(create_app(cfg), host=bind_host, port=bind_port, log_level=cfg.log_level.lower())
    except Exception as e:
        _fail(e)


@app.command("resolve")
def resolve_cmd(
    url: str = typer.Argument(..., help="Request URL or path, e.g. /my-graph/staging"),
    api_key: Optional[str] = typer.Option(None, help="Value for the X-API-Key header"),
):
    """Show which graph, variant or hash a request URL addresses."""
    try:
        headers = {resolver.API_KEY_HEADER: api_key} if api_key else None
        target = resolver.resolve(url, headers)
        print_kv(
            "Resolved target",
            {
                "graph": target.graph_id,
                "variant": target.variant,
                "hash": target.hash,
                "apiKey": utils.mask_secret(target.api_key),
            },
        )
    except Exception as e:
        _fail(e)


@schema_app.command("pull")
def schema_pull(
    graph: str = typer.Argument(..., help="Graph ID"),
    variant: Optional[str] = typer.Option(None, help="Variant name (default: current)"),
    hash_: Optional[str] = typer.Option(None, "--hash", help="Schema hash"),
    api_key: Optional[str] = typer.Option(None, help="Registry API key"),
    mode: Optional[str] = typer.Option(None, help="Schema mode (introspection|document)"),
    out: Optional[str] = typer.Option(None, help="Output file path"),
    config_path: Optional[str] = typer.Option(None, "--config", help="Config file path"),
):
    """Fetch a graph's schema from the registry."""
    try:
        cfg = _load_config(config_path, mode)
        target = _target(graph, variant, hash_, api_key)

        console.print(f"[cyan]Fetching {cfg.mode.value} for {target.graph_id}:{target.specifier}...[/cyan]")
        payload = Pipeline(cfg).payload(target)

        if isinstance(payload, DocumentPayload):
            if out:
                utils.write_text(out, payload.document)
            else:
                print(payload.document)
        elif out:
            utils.write_json(out, {"__schema": payload.schema})
        else:
            print(utils.to_json({"__schema": payload.schema}))

        if out:
            print_kv("Schema pulled", {"graph": target.graph_id, "schema": target.specifier, "path": out})
    except Exception as e:
        _fail(e)


@app.command("query")
def query_cmd(
    query_file: str = typer.Argument(..., help="GraphQL query file"),
    graph: str = typer.Argument(..., help="Graph ID"),
    variant: Optional[str] = typer.Option(None, help="Variant name (default: current)"),
    hash_: Optional[str] = typer.Option(None, "--hash", help="Schema hash"),
    api_key: Optional[str] = typer.Option(None, help="Registry API key"),
    variables: Optional[str] = typer.Option(None, help="JSON file with query variables"),
    operation: Optional[str] = typer.Option(None, help="Operation name to execute"),
    mode: Optional[str] = typer.Option(None, help="Schema mode (introspection|document)"),
    output: str = typer.Option("console", help="Output format (console|json)"),
    config_path: Optional[str] = typer.Option(None, "--config", help="Config file path"),
):
    """Execute a query against a graph's registry schema."""
    try:
        cfg = _load_config(config_path, mode)
        target = _target(graph, variant, hash_, api_key)
        request = executor.parse_request(
            {
                "query": utils.read_text(query_file),
                "variables": utils.read_json(variables) if variables else None,
                "operationName": operation,
            }
        )

        result = Pipeline(cfg).run(target, request)
        emit_result(result, output)

        if result.errors:
            raise typer.Exit(2)
    except typer.Exit:
        raise
    except Exception as e:
        _fail(e)


@config_app.command("init")
def config_init(
    path: Optional[str] = typer.Option(None, help="Where to write the config file"),
):
    """Write an example config file."""
    try:
        written = config.create_example_config(path)
        print_kv("Config written", {"path": written, "modes": ", ".join(m.value for m in SchemaMode)})
    except Exception as e:
        _fail(e)


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
