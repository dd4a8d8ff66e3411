"""Command line interface: ``runsible [options] yaml_file``.

Exit status is 0 when the runlist completes and 1 when it is aborted,
the connection fails, or the yaml_file cannot be loaded.
"""

import argparse
import asyncio
import logging
import sys

from runsible import __version__
from runsible.config import RuntimeOptions, Settings, load_policy
from runsible.errors import AlertBackendError, PolicyError, RunAborted, describe
from runsible.runner import ssh_runlist
from runsible.services.session import ConnectError
from runsible.utils.console import ColorfulFormatter

logger = logging.getLogger(__name__)


def configure_logging(options: RuntimeOptions) -> None:
    """Install the colorful formatter on the runsible logger.

    Colors are disabled when stderr is not a TTY.
    """
    use_colors = options.log_colors and sys.stderr.isatty()

    runsible_logger = logging.getLogger("runsible")
    runsible_logger.setLevel(getattr(logging, options.log_level, logging.INFO))

    # Only add handler if not already configured
    if not runsible_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(ColorfulFormatter(use_colors=use_colors))
        runsible_logger.addHandler(handler)
        runsible_logger.propagate = False

    logging.getLogger("asyncssh").setLevel(logging.WARNING)


def _non_negative_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from None
    if parsed < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {parsed}")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser, showing defaults in the help text."""
    d = Settings()
    parser = argparse.ArgumentParser(
        prog="runsible",
        usage="runsible [options] yaml_file",
        description="Run a YAML runlist of shell commands over one SSH session.",
    )
    parser.add_argument("yaml_file", nargs="?", help="policy document to run")
    parser.add_argument(
        "-v", "--version", action="version", version=__version__,
        help="show runsible version",
    )
    parser.add_argument("-u", "--user", help=f"remote user [{d.user}]")
    parser.add_argument("-H", "--host", help=f"remote host [{d.host}]")
    parser.add_argument(
        "-p", "--port", type=_non_negative_int, help=f"remote port [{d.port}]"
    )
    parser.add_argument(
        "-r", "--retries", type=_non_negative_int, help=f"retry count [{d.retries}]"
    )
    parser.add_argument(
        "-s", "--silent", action="store_true", help="suppress alerts"
    )
    return parser


def usage(parser: argparse.ArgumentParser, msg: str | None = None) -> int:
    """Print help plus a message for the user and return exit status 1."""
    parser.print_help()
    print()
    if msg:
        print(msg)
    return 1


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, load the policy, and run its default runlist."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = RuntimeOptions.from_env()
    except FileNotFoundError as e:
        print(describe(e), file=sys.stderr)
        return 1
    configure_logging(options)

    if args.yaml_file is None:
        return usage(parser, "yaml_file is required")

    try:
        policy = load_policy(args.yaml_file)
    except (OSError, PolicyError) as e:
        return usage(parser, f"could not load yaml_file\n{describe(e)}")

    # yaml settings provide defaults, CLI options override them
    settings = policy.settings.with_overrides(
        user=args.user,
        host=args.host,
        port=args.port,
        retries=args.retries,
    )
    if args.silent:
        settings = settings.silenced()

    try:
        asyncio.run(ssh_runlist(settings, policy, options=options))
    except RunAborted as e:
        logger.error("Run aborted: %s", e)
        return 1
    except ConnectError as e:
        logger.error("%s", e)
        return 1
    except AlertBackendError as e:
        logger.error("Alert configuration error: %s", e)
        return 1
    return 0
