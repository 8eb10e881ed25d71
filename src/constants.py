"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONFIG_ERROR = 2
    RESOLUTION_ERROR = 3


class Engines(Enum):
    """Ruby engines known to the program.

    Custom engine names are still accepted; these are the common ones.

    Args:
        Enum (string): Engine identifiers.
    """

    RUBY = "ruby"
    JRUBY = "jruby"
    TRUFFLERUBY = "truffleruby"
    TRUFFLERUBY_GRAALVM = "truffleruby+graalvm"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    DEFAULT_ENGINE = Engines.RUBY.value
    DEFAULT_VERSION_INPUT = "default"
    DEFAULT_VERSION_FILE = "Gemfile.lock"
    DEFAULT_WORKING_DIRECTORY = "."
    RUBY_VERSION_FILE = ".ruby-version"
    TOOL_VERSIONS_FILE = ".tool-versions"
    CONFIG_FILE = ".rubyresolve.yml"

    LOCKFILE_MARKER = "RUBY VERSION"
    LOCKFILE_VERSION_PATTERN = r"\d+\.\d+\.\d+"
    LOCKFILE_VERSION_PATTERN_LEGACY = r"\d.\d.\d"

    HEAD_VERSIONS = ["head", "debug", "mingw", "mswin", "ucrt"]
    STABLE_VERSION_PATTERN = r"^\d+(\.\d+)*$"

    OUTPUT_FORMATS = ["text", "json"]
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    ENV_LOG_LEVEL = "RUBYRESOLVE_LOG_LEVEL"
