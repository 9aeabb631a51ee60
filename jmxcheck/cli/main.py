"""Process entry point for check_jmx_health."""

import sys
from collections.abc import Sequence

import click

from jmxcheck.core.config import get_app_config
from jmxcheck.core.exceptions import MalformedInputError
from jmxcheck.core.logging import get_logger, log_with_source, setup_logging
from jmxcheck.probe.arguments import parse_arguments
from jmxcheck.probe.interpreter import ExitStatus
from jmxcheck.probe.runner import run, show_usage

# Nagios UNKNOWN, used only when probe.yaml itself cannot be loaded.
FALLBACK_UNKNOWN_EXIT_CODE = 3


def main(argv: Sequence[str] | None = None) -> None:
    tokens = sys.argv[1:] if argv is None else list(argv)

    try:
        app_config = get_app_config()
    except (FileNotFoundError, ValueError) as e:
        click.echo(f"Error loading configuration: {e}")
        sys.exit(FALLBACK_UNKNOWN_EXIT_CODE)

    exit_codes = app_config.probe.exit_codes

    try:
        config = parse_arguments(tokens)
    except MalformedInputError as e:
        click.echo(e.message)
        show_usage()
        sys.exit(ExitStatus.UNKNOWN.exit_code(exit_codes))

    if config.debug:
        setup_logging(level="DEBUG")
    elif config.verbose:
        setup_logging(level="INFO")
    else:
        setup_logging()

    logger = get_logger(__name__)
    log_with_source(
        logger, "cli", "debug", "Probe starting",
        service_url=config.service_url, object_name=config.object_name, operation=config.operation,
    )

    status = run(config, app_config=app_config)
    sys.exit(status.exit_code(exit_codes))


if __name__ == "__main__":
    main()
