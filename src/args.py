"""Argument parsing functionality for depscout."""

import argparse

from constants import Constants, VersionOrdering
from versioning.models import parse_coordinate


def _coordinate(text):
    try:
        parse_coordinate(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e
    return text


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="depscout",
        description=(
            "depscout - Maven dependency version scout across local and remote repositories"
        ),
        add_help=True,
    )

    input_group = parser.add_mutually_exclusive_group(required=True)
    input_group.add_argument("-d", "--directory",
                             dest="FROM_SRC",
                             help="Project directory containing pom.xml",
                             action="store",
                             type=str)
    input_group.add_argument("-f", "--file",
                             dest="POM_FILE",
                             help="Path to a pom.xml file",
                             action="store",
                             type=str)
    input_group.add_argument("--coordinate",
                             dest="COORDINATE",
                             help="Look up a single artifact given as group:artifact[:version]",
                             action="store",
                             type=_coordinate)

    parser.add_argument("--local-repo",
                        dest="LOCAL_REPO",
                        help="Local repository root (default: from settings.xml or ~/.m2/repository)",
                        action="store",
                        type=str)
    parser.add_argument("--no-local",
                        dest="NO_LOCAL",
                        help="Do not scan the local repository.",
                        action="store_true")
    parser.add_argument("--no-settings",
                        dest="NO_SETTINGS",
                        help="Do not read repositories from Maven settings.xml.",
                        action="store_true")
    parser.add_argument("--timeout",
                        dest="TIMEOUT",
                        help=f"Seconds to wait for repositories per dependency (default: {Constants.FANOUT_TIMEOUT})",
                        action="store",
                        type=float)
    parser.add_argument("--ordering",
                        dest="ORDERING",
                        help="Version ordering (default: lexicographic)",
                        action="store",
                        type=str.lower,
                        choices=[o.value for o in VersionOrdering])
    parser.add_argument("--tree",
                        dest="TREE_FILE",
                        help="Rendered 'mvn dependency:tree' output to check for managed-version conflicts",
                        action="store",
                        type=str)

    parser.add_argument("-o", "--output",
                        dest="OUTPUT",
                        help="Path to JSON output file",
                        action="store",
                        type=str)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help=f"Set the logging level (default: ${Constants.ENV_LOG_LEVEL} or INFO)",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'])
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("--error-on-warnings",
                        dest="ERROR_ON_WARNINGS",
                        help="Exit with a non-zero status code if conflicts are present.",
                        action="store_true")
    parser.add_argument("-q", "--quiet",
                        dest="QUIET",
                        help="Do not output to console.",
                        action="store_true")
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML, YML, or JSON)",
                        action="store",
                        type=str)

    return parser.parse_args(argv)
