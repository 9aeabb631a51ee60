"""
Argument Parser.

Converts command-line tokens into a ProbeConfig. Parsing is done by a click
command run outside standalone mode so that every parse failure surfaces as
a MalformedInputError instead of click's own exit handling.

Required values (-U, -O, -o) are optional at parse time: a missing value is
reported with the usage text by the runner, not as a parse error.
Unknown flags are rejected.
"""

from collections.abc import Sequence
from dataclasses import dataclass

import click

from jmxcheck.core.exceptions import MalformedInputError

PROG_NAME = "check_jmx_health"


@dataclass(frozen=True)
class ProbeConfig:
    """Everything one probe run needs from the command line."""

    service_url: str | None = None
    object_name: str | None = None
    operation: str | None = None
    username: str | None = None
    password: str | None = None
    help: bool = False
    verbose: bool = False
    debug: bool = False
    timeout: float | None = None

    @property
    def credentials(self) -> tuple[str, str] | None:
        """Username and password, or None unless both are set."""
        if self.username is None or self.password is None:
            return None
        return self.username, self.password

    @property
    def missing(self) -> list[str]:
        """Flags of the required values that were not given."""
        required = (("-U", self.service_url), ("-O", self.object_name), ("-o", self.operation))
        return [flag for flag, value in required if not value]


@click.command(name=PROG_NAME, add_help_option=False)
@click.option("-U", "service_url", default=None, metavar="URL", help="Jolokia agent URL.")
@click.option("-O", "object_name", default=None, metavar="NAME", help="MBean object name or pattern.")
@click.option("-o", "operation", default=None, metavar="OP", help="Operation to invoke.")
@click.option("--username", default=None, help="Username for basic authentication.")
@click.option("--password", default=None, help="Password for basic authentication.")
@click.option("-h", "help_", is_flag=True, help="Show help.")
@click.option("-v", "--verbose", "-A", "verbose", is_flag=True, help="Print a traceback on errors.")
@click.option("-d", "--debug", is_flag=True, help="Enable DEBUG level logging.")
@click.option(
    "-t", "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Connect/invoke timeout in seconds.",
)
def probe_command(
    service_url: str | None,
    object_name: str | None,
    operation: str | None,
    username: str | None,
    password: str | None,
    help_: bool,
    verbose: bool,
    debug: bool,
    timeout: float | None,
) -> ProbeConfig:
    return ProbeConfig(
        service_url=service_url,
        object_name=object_name,
        operation=operation,
        username=username,
        password=password,
        help=help_,
        verbose=verbose,
        debug=debug,
        timeout=timeout,
    )


def parse_arguments(tokens: Sequence[str]) -> ProbeConfig:
    """
    Parse command-line tokens.

    Raises:
        MalformedInputError: On unknown flags, stray arguments, or a flag
            missing its value.
    """
    try:
        return probe_command.main(args=list(tokens), prog_name=PROG_NAME, standalone_mode=False)
    except click.ClickException as e:
        raise MalformedInputError(e.format_message()) from e
