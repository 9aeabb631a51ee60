"""
Probe Orchestration.

One probe run: help or usage when asked for or needed, otherwise
connect -> resolve -> invoke -> release -> interpret -> print.

Output contract:
    stdout  - one line with the result, or help/usage text, or the error message
    stderr  - traceback on failure, only with --verbose
"""

import traceback
from pathlib import Path

import click
import httpx

from jmxcheck.core.config import AppConfig, Settings, get_app_config, get_settings
from jmxcheck.core.exceptions import ApplicationError
from jmxcheck.core.logging import get_logger, log_with_source
from jmxcheck.probe.arguments import ProbeConfig
from jmxcheck.probe.interpreter import ExitStatus, interpret
from jmxcheck.probe.invoker import invoke, open_connection

logger = get_logger(__name__)

RESOURCES_DIR = Path(__file__).parent / "resources"


def _read_resource(name: str) -> str:
    return (RESOURCES_DIR / name).read_text(encoding="utf-8")


def show_help() -> None:
    click.echo(_read_resource("help.txt"))


def show_usage() -> None:
    click.echo(_read_resource("usage.txt"))


def _resolve_credentials(config: ProbeConfig, settings: Settings) -> tuple[str | None, str | None]:
    """Command-line credentials win; the environment is used only when neither flag was given."""
    if config.username is None and config.password is None:
        username, password = settings.username, settings.password
    else:
        username, password = config.username, config.password
    if username is None or password is None:
        return None, None
    return username, password


def run(
    config: ProbeConfig,
    app_config: AppConfig | None = None,
    settings: Settings | None = None,
    transport: httpx.BaseTransport | None = None,
) -> ExitStatus:
    """
    Execute one probe run and return its status.

    Args:
        config: Parsed command line.
        app_config: YAML configuration. Loaded when None.
        settings: Credentials from the environment. Loaded when None.
        transport: Optional httpx transport, mainly for tests.
    """
    if config.help:
        show_help()
        return ExitStatus.OK

    if config.missing:
        log_with_source(logger, "cli", "warning", "Required arguments missing", missing=config.missing)
        show_usage()
        return ExitStatus.UNKNOWN

    try:
        if app_config is None:
            app_config = get_app_config()
        if settings is None:
            settings = get_settings()
        connection_settings = app_config.probe.connection
        username, password = _resolve_credentials(config, settings)
        timeout = config.timeout if config.timeout is not None else connection_settings.timeout_seconds

        with open_connection(
            config.service_url,
            username,
            password,
            timeout=timeout,
            check_period=connection_settings.check_period_seconds,
            verify=connection_settings.verify_tls,
            transport=transport,
        ) as connection:
            value = invoke(connection, config.object_name, config.operation)

        result = interpret(value)
    except Exception as e:
        message = e.message if isinstance(e, ApplicationError) else str(e)
        log_with_source(
            logger, "cli", "error", "Probe failed",
            error=message, error_type=type(e).__name__,
            code=getattr(e, "code", None),
        )
        click.echo(message)
        if config.verbose:
            click.echo(traceback.format_exc(), err=True, nl=False)
        return ExitStatus.UNKNOWN

    log_with_source(logger, "cli", "info", "Probe finished", status=result.status.value)
    click.echo(result.text)
    return result.status
