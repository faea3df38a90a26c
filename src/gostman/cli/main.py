"""
Gostman CLI Main Entry Point

Command-line interface for sending requests and managing saved definitions.
"""

import sys
from pathlib import Path
from typing import Optional

import click

from .. import __version__
from ..core.config import get_config, reload_config
from ..core.exceptions import GostmanException
from ..core.jsontext import format_json, parse_environment
from ..core.logging import setup_logging
from ..core.models import ExecutionResult, RequestDefinition, default_headers_text
from ..request.executor import HTTPExecutor
from ..request.resolver import unresolved_placeholders
from ..request.runner import RequestRunner
from ..storage.json_store import JSONRequestStore


def fail(error: GostmanException) -> None:
    """Print the error label and message, then exit with status 1."""
    click.echo(f"✗ {error.label}: {error.message}", err=True)
    sys.exit(1)


def echo_result(result: ExecutionResult) -> None:
    click.echo(result.label)
    click.echo()
    click.echo(format_json(result.body))


def warn_unresolved(definition: RequestDefinition, environment: str) -> None:
    """Warn about placeholders that have no binding in the environment."""
    try:
        variables = parse_environment(environment)
    except GostmanException:
        return

    fields = (
        definition.url,
        definition.headers,
        definition.query_params,
        definition.body,
    )
    missing = []
    for text in fields:
        for name in unresolved_placeholders(text, variables):
            if name not in missing:
                missing.append(name)
    if missing:
        click.echo(f"! Unresolved variables: {', '.join(missing)}", err=True)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding gostman.json (defaults to the per-profile data dir)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Logging level",
)
@click.option(
    "--env-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Dotenv file with GOSTMAN_ settings",
)
@click.pass_context
def cli(
    ctx: click.Context,
    data_dir: Optional[Path],
    log_level: Optional[str],
    env_file: Optional[Path],
):
    """
    Gostman - send HTTP requests and keep them with their environment.
    """
    config = reload_config(env_file) if env_file else get_config()
    # Quiet by default; debug mode or an explicit level turns logging up
    if log_level is None and not config.debug:
        log_level = "WARNING"
    setup_logging(log_level=log_level)

    store_path = (
        data_dir / config.storage.file_name if data_dir else config.store_path
    )
    store = JSONRequestStore(store_path)
    ctx.obj = RequestRunner(store=store, executor=HTTPExecutor.from_config(config))


@cli.command("send")
@click.argument("request_id")
@click.option(
    "--save/--no-save", default=True, help="Store the response on the definition"
)
@click.pass_obj
def send_saved(runner: RequestRunner, request_id: str, save: bool):
    """
    Send a saved request.

    Example:
        gostman send 5c8f...
    """
    try:
        definition = runner.store.get_request(request_id)
        warn_unresolved(definition, runner.store.get_environment_text())
        result = runner.run_saved(request_id, save_response=save)
    except GostmanException as e:
        fail(e)
    echo_result(result)
    if not result.ok:
        sys.exit(1)


@cli.command("run")
@click.option("--method", "-X", default="GET", help="HTTP method or GRAPHQL")
@click.option("--url", "-u", required=True, help="URL, may contain {{variables}}")
@click.option("--header-json", "-H", default="{}", help="Headers as JSON object text")
@click.option("--body", "-d", default="", help="Raw body text")
@click.option("--params", "-p", default="", help="Query params as JSON object text")
@click.pass_obj
def run_adhoc(
    runner: RequestRunner,
    method: str,
    url: str,
    header_json: str,
    body: str,
    params: str,
):
    """
    Send a request without saving it.

    Example:
        gostman run -X POST -u "{{base}}/users" -d '{"name": "x"}'
    """
    definition = RequestDefinition(
        method=method, url=url, headers=header_json, body=body, query_params=params
    )
    environment = runner.store.get_environment_text()
    warn_unresolved(definition, environment)
    result = runner.run(definition, environment)
    echo_result(result)
    if not result.ok:
        sys.exit(1)


@cli.group()
def request():
    """Saved request commands."""
    pass


@request.command("list")
@click.pass_obj
def list_requests(runner: RequestRunner):
    """
    List saved requests.

    Example:
        gostman request list
    """
    requests = runner.store.list_requests()
    if not requests:
        click.echo("No saved requests.")
        return

    for definition in requests:
        click.echo(f"{definition.id}  {definition.method:<7} {definition.name}")
        click.echo(f"    {definition.url}")


@request.command("show")
@click.argument("request_id")
@click.pass_obj
def show_request(runner: RequestRunner, request_id: str):
    """Show a saved request."""
    try:
        definition = runner.store.get_request(request_id)
    except GostmanException as e:
        fail(e)

    click.echo(f"Name: {definition.name}")
    click.echo(f"ID: {definition.id}")
    click.echo(f"{definition.method} {definition.url}")
    click.echo("\nHeaders:")
    click.echo(format_json(definition.headers))
    if definition.query_params:
        click.echo("\nQuery Params:")
        click.echo(format_json(definition.query_params))
    if definition.body:
        click.echo("\nBody:")
        click.echo(format_json(definition.body))
    if definition.response:
        click.echo("\nLast Response:")
        click.echo(format_json(definition.response))


@request.command("save")
@click.option("--id", "request_id", default="", help="Id of the request to overwrite")
@click.option("--name", "-n", required=True, help="Request name")
@click.option("--method", "-X", default="GET", help="HTTP method or GRAPHQL")
@click.option("--url", "-u", required=True, help="URL, may contain {{variables}}")
@click.option("--header-json", "-H", default=None, help="Headers as JSON object text")
@click.option("--body", "-d", default="", help="Raw body text")
@click.option("--params", "-p", default="", help="Query params as JSON object text")
@click.pass_obj
def save_request(
    runner: RequestRunner,
    request_id: str,
    name: str,
    method: str,
    url: str,
    header_json: Optional[str],
    body: str,
    params: str,
):
    """
    Save a request definition.

    Example:
        gostman request save -n "List users" -u "{{base}}/users"
    """
    definition = RequestDefinition(
        id=request_id,
        name=name,
        method=method.strip().upper(),
        url=url,
        headers=header_json if header_json is not None else default_headers_text(),
        body=body,
        query_params=params,
    )
    try:
        stored = runner.store.save_request(definition)
    except GostmanException as e:
        fail(e)
    click.echo("✓ Request Saved Successfully")
    click.echo(f"  ID: {stored.id}")


@request.command("delete")
@click.argument("request_id")
@click.pass_obj
def delete_request(runner: RequestRunner, request_id: str):
    """Delete a saved request."""
    try:
        runner.store.delete_request(request_id)
    except GostmanException as e:
        fail(e)
    click.echo(f"✓ Deleted request: {request_id}")


@cli.group()
def env():
    """Environment variable commands."""
    pass


@env.command("show")
@click.pass_obj
def show_environment(runner: RequestRunner):
    """Print the environment variables."""
    click.echo(format_json(runner.store.get_environment_text()))


@env.command("set")
@click.argument("variables")
@click.pass_obj
def set_environment(runner: RequestRunner, variables: str):
    """
    Replace the environment variables.

    Example:
        gostman env set '{"base": "https://api.example.com"}'
    """
    try:
        runner.store.save_environment_text(variables)
    except GostmanException as e:
        fail(e)
    click.echo("✓ Environment Variables Saved Successfully")


@cli.command("serve")
@click.option("--host", default=None, help="Bind host")
@click.option("--port", type=int, default=None, help="Bind port")
@click.pass_obj
def serve(runner: RequestRunner, host: Optional[str], port: Optional[int]):
    """Run the HTTP API."""
    from ..api.app import run_server

    run_server(host=host, port=port, store=runner.store)


def main() -> None:
    """Main entry point for the Gostman CLI."""
    cli()


if __name__ == "__main__":
    main()
