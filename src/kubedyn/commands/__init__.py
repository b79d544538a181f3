"""
Inspect Kubernetes API resources and the requests kubedyn builds for them, without talking to a cluster.
"""

from enum import Enum
import sys
from databind.core import ConversionError
from loguru import logger
from typer import Exit, Option, Typer
from yaml import YAMLError

from kubedyn import __version__


app = Typer(help=__doc__, no_args_is_help=True, pretty_exceptions_enable=False)

INPUT_ERRORS = (OSError, YAMLError, ConversionError)
""" Errors from reading a catalog or body file that are reported without a traceback. """


from . import request  # noqa: F401,E402
from . import resources  # noqa: F401,E402


class LogLevel(str, Enum):
    TRACE = "trace"
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


def _print_version(value: bool) -> None:
    if value:
        print(__version__)
        raise Exit()


@app.callback()
def _callback(
    log_level: LogLevel = Option(LogLevel.INFO, "--log-level", "-l", help="The log level to use."),
    version: bool = Option(False, "--version", is_eager=True, callback=_print_version, help="Print the version."),
) -> None:
    logger.remove()
    logger.add(sys.stderr, level=log_level.name, format="<level>{level: <8}</level> {message}")


def main() -> None:
    app()
