#!/usr/bin/env python3
"""mbpoll-compatible command line for pymbpoll, served through Typer."""

import logging
from typing import NoReturn

import click
import typer
from typer.core import TyperCommand

from . import __version__  # type: ignore
from .args import HELP_TEXT, parse_args
from .config import Configuration
from .dispatch import resolve_operation
from .errors import ModbusIOError, UsageError
from .poll import run_operation
from .transport import open_session
from .types import Action

PROG = "pymbpoll"
TOKENS_KEY = "pymbpoll.tokens"

logger = logging.getLogger(__name__)


class RawTokensCommand(TyperCommand):
    """
    Keep Click's option parser out of the way.

    mbpoll semantics depend on token order (the target is classified by the mode seen
    so far, `--` is a real separator for write values), so the untouched token list is
    stored on the context for pymbpoll.args to parse.
    """

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        ctx.meta[TOKENS_KEY] = list(args)
        return []


app = typer.Typer(
    name=PROG,
    help="Modbus master for the command line: read or write coils and registers.",
    add_completion=False,
)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbose flag."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if not verbose else "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def describe_config(config: Configuration) -> list[str]:
    """Lines printed before executing in verbose mode."""
    if config.mode.is_network:
        link = f"{config.host}, port {config.port}"
    else:
        parity = config.parity[0].upper()
        link = f"{config.device}, {config.baudrate}-{config.databits}{parity}{config.stopbits}"
    return [
        f"Protocol configuration: Modbus {config.mode.value.upper()}",
        f"Slave configuration...: address = [{config.slave_id}]",
        f"Start reference.......: {config.start_ref}, count = {config.count}",
        f"Data type.............: {config.data_type} ({config.data_type.table.label})",
        f"Word order............: {'big' if config.big_endian else 'little'} endian",
        f"Communication.........: {link}, t/o {config.timeout:.2f} s, poll rate {config.poll_rate_ms} ms",
    ]


def _fail(message: str, code: int) -> NoReturn:
    typer.echo(f"{PROG}: {message}", err=True)
    raise typer.Exit(code)


@app.command(cls=RawTokensCommand)
def main(ctx: typer.Context) -> None:
    """
    pymbpoll [OPTIONS] DEVICE|HOST [WRITE_VALUES...] [OPTIONS]

    Reads COUNT values starting at the reference; with WRITE_VALUES, writes them instead.
    Run with -h for the option list.
    """
    tokens = ctx.meta.get(TOKENS_KEY, [])

    try:
        config = parse_args(tokens)
    except UsageError as e:
        _fail(str(e), 2)

    if config.action is Action.HELP:
        typer.echo(HELP_TEXT, nl=False)
        return
    if config.action is Action.VERSION:
        typer.echo(f"{PROG} {__version__}")
        return

    setup_logging(config.verbose)
    if config.verbose:
        for line in describe_config(config):
            typer.echo(line)

    try:
        operation = resolve_operation(config)
        with open_session(config) as session:
            run_operation(session, operation, config, emit=typer.echo)
    except UsageError as e:
        _fail(str(e), 2)
    except ModbusIOError as e:
        _fail(str(e), 3)
    except KeyboardInterrupt:
        typer.echo("\nStopped by user", err=True)
        raise typer.Exit(0)
    except Exception as e:
        if config.verbose:
            logger.exception("Unexpected error")
        _fail(f"unexpected error: {e}", 4)


if __name__ == "__main__":
    app()
