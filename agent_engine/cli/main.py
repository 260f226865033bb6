"""
Main CLI entry point for agent-engine.

The command reads its input from --params or stdin, builds an Engine from
the configuration file, dispatches the command, and writes a JSON envelope
``{"code", "data", "message"}`` to stdout.

Example:
    $ agent-engine -c query -p "What is AI?"
    $ echo "hello" | agent-engine -c query
    $ agent-engine -c list
    $ agent-engine -c query -p "hello" -e "$.data.reply"
"""

import logging
import os
from pathlib import Path

import rich_click as click
from dotenv import load_dotenv

from agent_engine import __version__
from agent_engine.agent.engine import Engine
from agent_engine.agent.handlers import dispatch, get_registry
from agent_engine.cli.utils import (
    ResponseCode,
    build_response,
    configure_logging,
    emit,
    extract_path,
    get_console,
    read_input,
    transport_response,
)
from agent_engine.llm.exceptions import AgentEngineError

logger = logging.getLogger(__name__)


def load_env_files():
    """Load the first .env file found in the standard locations."""
    cwd = Path.cwd()

    env_paths = [
        cwd / 'config' / '.env',
        cwd / '.env',
    ]

    loaded_path = None
    for env_path in env_paths:
        if env_path.exists():
            abs_path = env_path.resolve()
            load_dotenv(abs_path, override=False)  # Don't override existing env vars
            loaded_path = abs_path
            break

    if loaded_path:
        os.environ['_AGENT_ENGINE_ENV_FILE'] = str(loaded_path)

    return loaded_path


click.rich_click.USE_RICH_MARKUP = True
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.MAX_WIDTH = 100
click.rich_click.STYLE_OPTION = "bold cyan"
click.rich_click.STYLE_SWITCH = "bold green"
click.rich_click.STYLE_METAVAR = "bold yellow"
click.rich_click.STYLE_USAGE = "yellow"
click.rich_click.STYLE_OPTION_DEFAULT = "dim yellow"
click.rich_click.ERRORS_SUGGESTION = "Try running the '--help' flag for more information."

EPILOG = """
Examples:

  agent-engine -c query -p "What is AI?"

  echo "hello" | agent-engine -c query

  agent-engine -c list

  agent-engine -c query -p "hello" -e "$.data.reply"
"""


def _fail(ctx: click.Context, code: ResponseCode, message: str) -> None:
    """Write an error envelope and exit with status 1."""
    transport_response(code, None, message)
    ctx.exit(1)


@click.command(
    context_settings={"help_option_names": ["-h", "--help"]},
    epilog=EPILOG,
)
@click.option(
    '-c', '--command',
    default='query',
    show_default=True,
    help=f"Command to run: {', '.join(get_registry().list_commands())}",
)
@click.option(
    '-f', '--conf',
    'config_path',
    default='./conf.yaml',
    show_default=True,
    envvar='AGENT_ENGINE_CONFIG',
    help='Path to the provider configuration file (YAML or TOML)',
)
@click.option(
    '-p', '--params',
    default='',
    help='Command input; read from stdin when omitted (optional for list)',
)
@click.option(
    '-m', '--model',
    'model_id',
    default='',
    help="Model to use (default: the provider's first model)",
)
@click.option(
    '--provider',
    'provider_name',
    default='',
    help='Provider to use (default: the first configured provider)',
)
@click.option(
    '-e', '--extract',
    default='$',
    show_default=True,
    help='Print only the value at this path of the query response, e.g. $.data.reply',
)
@click.option(
    '--log-file',
    type=click.Path(dir_okay=False),
    envvar='AGENT_ENGINE_LOG_FILE',
    help='Append log records to this file',
)
@click.option('-v', '--verbose', is_flag=True, help='Show progress logs on stderr')
@click.version_option(version=__version__, prog_name='agent-engine')
@click.pass_context
def cli(ctx, command, config_path, params, model_id, provider_name, extract, log_file, verbose):
    """
    Agent Engine - send prompts to LLM providers with automatic model failover.

    Failed queries are retried on other models of the same provider.
    """
    load_env_files()
    configure_logging(verbose=verbose, log_file=log_file)

    try:
        content = read_input(params)
    except OSError as e:
        logger.error(f"Failed to read stdin: {e}")
        _fail(ctx, ResponseCode.INTERNAL_ERROR, f"Failed to read stdin: {e}")

    if not content.strip() and command != 'list':
        message = f"{command} command requires input: pass it with -p or pipe it to stdin"
        logger.error(message)
        _fail(ctx, ResponseCode.INTERNAL_ERROR, message)

    try:
        engine = Engine.from_config(config_path, provider_name, model_id)
    except AgentEngineError as e:
        logger.error(f"Failed to create engine from config: {e}")
        _fail(ctx, ResponseCode.INTERNAL_ERROR, f"Failed to create engine from config: {e}")

    provider, model, base_url = engine.selection()
    logger.info(f"Loaded config: provider={provider}, model={model}, base_url={base_url}")

    try:
        data, matched = dispatch(engine, command, content)
    except Exception as e:
        logger.error(f"Command {command} failed: {e}")
        if verbose:
            get_console().print_exception()
        _fail(ctx, ResponseCode.INTERNAL_ERROR, f"Internal error: {e}")

    if not matched:
        _fail(ctx, ResponseCode.EVENT_NOT_FOUND, f"Unknown command: {command}")

    if command == 'query' and extract and extract != '$':
        response = build_response(ResponseCode.SUCCESS, data, "success")
        try:
            value = extract_path(response, extract)
        except KeyError:
            logger.error(f"Extract path not found: {extract}")
            _fail(ctx, ResponseCode.INTERNAL_ERROR, f"Extract path not found: {extract}")
        emit(value)
        return

    transport_response(ResponseCode.SUCCESS, data, "success")


if __name__ == '__main__':
    cli()
