"""Argument parsing functionality for rubyresolve."""

import argparse
from constants import Constants, Engines

def parse_args(argv=None):
    """Parses the arguments passed to the program.

    Options left unset are None so that config file values can fill them in.
    """
    parser = argparse.ArgumentParser(
        prog="rubyresolve",
        description=(
            "rubyresolve - Resolve the Ruby engine and version to install"
        ),
        add_help=True,
    )

    parser.add_argument("-r", "--ruby-version",
                        dest="RUBY_VERSION",
                        help=(
                            f"Engine and version, e.g. 3.2, {Engines.JRUBY.value}, {Engines.TRUFFLERUBY.value}-23.0, "
                            f"{Engines.TRUFFLERUBY_GRAALVM.value}, "
                            f"{Constants.RUBY_VERSION_FILE} or {Constants.TOOL_VERSIONS_FILE} "
                            f"(default: {Constants.DEFAULT_VERSION_INPUT})"
                        ),
                        action="store", type=str)
    parser.add_argument("-f", "--ruby-version-file",
                        dest="RUBY_VERSION_FILE",
                        help=f"Lock-file to read the version header from (default: {Constants.DEFAULT_VERSION_FILE})",
                        action="store", type=str)
    parser.add_argument("-C", "--working-directory",
                        dest="WORKING_DIRECTORY",
                        help="Directory containing the version files (default: .)",
                        action="store", type=str)
    parser.add_argument("-c", "--catalog",
                        dest="CATALOG",
                        help="YAML or JSON file listing available versions per engine",
                        action="store", type=str)
    parser.add_argument("--platform",
                        dest="PLATFORM",
                        help="Platform name, e.g. ubuntu-22.04 (default: detected)",
                        action="store", type=str)
    parser.add_argument("--config",
                        dest="CONFIG",
                        help=f"Path to YAML/JSON config file (default: {Constants.CONFIG_FILE} if present)",
                        action="store", type=str)
    parser.add_argument("--legacy-lockfile-pattern",
                        dest="LEGACY_LOCKFILE_PATTERN",
                        help="Use the permissive historical pattern to read the lock-file version",
                        action="store_true", default=None)

    parser.add_argument("-o", "--output",
                        dest="OUTPUT",
                        help="Path to output file",
                        action="store",
                        type=str)
    parser.add_argument("--format",
                        dest="OUTPUT_FORMAT",
                        help="Output format (text or json). Defaults to text.",
                        action="store",
                        type=str.lower,
                        default="text",
                        choices=Constants.OUTPUT_FORMATS)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='INFO')
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
