"""Main module entrypoint for local runtime execution.

This module validates startup configuration, checks the data store and
launches the FastAPI service.
"""

import argparse
import logging

from tianguistore.bootstrap import DependencyUnavailableError, bootstrap_create_sequencer
from tianguistore.config import ConfigurationError, config_load_settings
from tianguistore.observability import observability_configure_logging

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    """Run selected runtime command with validated startup configuration.

    Args:
        argv: Command-line arguments, defaulting to `sys.argv[1:]`.

    Returns:
        None: This function does not return a runtime value.

    Raises:
        SystemExit: Raised with status 1 for missing configuration or an unreachable data store.
    """

    argument_parser = argparse.ArgumentParser(description="TianguiStore runtime entrypoint")
    argument_parser.add_argument(
        "command",
        nargs="?",
        default="api",
        choices=("api", "check-db"),
        help="Runtime command: `api` starts the server, `check-db` only verifies configuration and the data store",
        type=str,
    )
    parsed_arguments = argument_parser.parse_args(argv)

    observability_configure_logging()
    try:
        settings = config_load_settings()
    except ConfigurationError as error:
        logger.error("%s", error, extra={"missing_keys": list(error.missing_keys) or None})
        raise SystemExit(1) from error

    sequencer = bootstrap_create_sequencer(settings)
    try:
        if parsed_arguments.command == "check-db":
            sequencer.startup_check_dependency()
            return
        sequencer.startup_run()
    except DependencyUnavailableError as error:
        raise SystemExit(1) from error


if __name__ == "__main__":
    main()
