"""Argument parsing functionality for upstream-lock."""

import argparse


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="upstream-lock",
        description=(
            "upstream-lock - Pin packages to the versions recorded in an upstream lock file"
        ),
        add_help=True,
    )

    parser.add_argument("-p", "--pool",
                        dest="POOL",
                        help="Path to the JSON description of the package pool",
                        action="store", type=str,
                        required=True)
    parser.add_argument("-l", "--lock-file",
                        dest="LOCK_FILE",
                        help="Path or URL of the upstream lock file "
                             "(overrides COMPOSER_UPSTREAM_LOCK_FILE)",
                        action="store", type=str)
    parser.add_argument("--allow-http",
                        dest="ALLOW_HTTP",
                        help="Allow the upstream lock file to be downloaded over HTTP(S)",
                        action="store_true")
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML, YML, or JSON)",
                        action="store",
                        type=str)

    parser.add_argument("-o", "--output",
                        dest="OUTPUT",
                        help="Path to output JSON file (defaults to stdout)",
                        action="store",
                        type=str)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level (default: $UPSTREAM_LOCK_LOG_LEVEL or INFO)",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default=None)
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-q", "--quiet",
                        dest="QUIET",
                        help="Do not output to console.",
                        action="store_true")

    return parser.parse_args(argv)
