"""upstream-lock - Pin a package pool to the versions of an upstream lock file

    Returns:
        int: Exit code
"""
import json
import logging
import os
import sys

from constants import ExitCodes, Constants
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from args import parse_args
from cli_config import resolve_config
from errors import InternalConsistencyError, LockInconsistencyError, LockSourceError
from overlay.engine import OverlayEngine
from overlay.pool import load_pool_event

logger = logging.getLogger(__name__)


def _setup_logging(args):
    """Configure logging based on CLI arguments.

    Args:
        args: Parsed CLI arguments.
    """
    if getattr(args, "LOG_LEVEL", None):
        os.environ[Constants.ENV_LOG_LEVEL] = str(args.LOG_LEVEL).upper()
    configure_logging()

    if getattr(args, "QUIET", False):
        logging.getLogger().setLevel(logging.ERROR)

    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(Constants.FILE_LOG_FORMAT))
        logging.getLogger().addHandler(file_handler)
        logger.info("Logging to file: %s", log_file)


def load_pool(path):
    """Loads the pool description, exiting on unreadable input.

    Args:
        path (str): Path to the JSON pool description.

    Returns:
        PrePoolCreateEvent: The pool event to overlay.
    """
    try:
        return load_pool_event(path)
    except FileNotFoundError as e:
        logger.error("File not found: %s, aborting", e)
        sys.exit(ExitCodes.FILE_ERROR.value)
    except IOError as e:
        logger.error("IO error: %s, aborting", e)
        sys.exit(ExitCodes.FILE_ERROR.value)
    except ValueError as e:
        logger.error("Invalid pool description %s: %s, aborting", path, e)
        sys.exit(ExitCodes.FILE_ERROR.value)


def export_json(packages, path=None, quiet=False):
    """Writes the resulting package list as JSON.

    Args:
        packages (list): Packages handed back to the solver.
        path (str, optional): Output file; stdout when omitted.
        quiet (bool, optional): Suppress stdout output.
    """
    payload = [package.to_dict() for package in packages]
    if path:
        try:
            with open(path, "w", encoding="utf-8") as file:
                json.dump(payload, file, indent=2)
            logger.info("JSON file has been successfully exported at: %s", path)
        except OSError as e:
            logger.error("JSON file couldn't be written to disk: %s", e)
            sys.exit(ExitCodes.FILE_ERROR.value)
        return
    if not quiet:
        json.dump(payload, sys.stdout, indent=2)
        sys.stdout.write("\n")


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    _setup_logging(args)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action="main")
        )

    config = resolve_config(args)
    event = load_pool(args.POOL)
    engine = OverlayEngine(config)

    try:
        packages = engine.limit_allowed_package_versions(event)
    except LockSourceError as e:
        logger.error("%s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)
    except LockInconsistencyError as e:
        logger.error("%s", e)
        sys.exit(ExitCodes.LOCK_INCONSISTENCY.value)
    except InternalConsistencyError as e:
        logger.error("Internal error: %s", e)
        sys.exit(ExitCodes.LOCK_INCONSISTENCY.value)

    export_json(packages, getattr(args, "OUTPUT", None), getattr(args, "QUIET", False))
    return ExitCodes.SUCCESS.value


if __name__ == "__main__":
    sys.exit(main())
