"""rubyresolve - Resolve the Ruby engine and version to install

    Reads the version declaration (explicit input, Gemfile.lock header,
    .ruby-version or .tool-versions), matches it against a catalog of
    available builds and prints the chosen engine and version.

    Returns:
        int: Exit code
"""
import sys
import logging
import json
from typing import Any, Callable, Dict, Optional

from constants import ExitCodes, Constants
from common.logging_utils import add_file_handler, configure_logging, extra_context, is_debug_enabled
from common.platform_utils import get_platform_name
from args import parse_args
from cli_config import build_inputs, get_setting, load_config
from versioning.catalog import VersionCatalog
from versioning.errors import (
    ConfigurationError,
    DeclarationFileNotFoundError,
    MalformedDeclarationError,
    ResolutionError,
)
from versioning.matcher import VersionMatcher
from versioning.models import DeclarationInputs, ResolutionResult
from versioning.parser import parse_declaration

logger = logging.getLogger(__name__)

AfterResolveHook = Callable[[Dict[str, Any]], None]


def resolve_ruby(
    inputs: DeclarationInputs,
    catalog: VersionCatalog,
    platform: str,
    matcher: Optional[VersionMatcher] = None,
    after_resolve_hook: Optional[AfterResolveHook] = None,
) -> ResolutionResult:
    """Resolve the declared engine and version against ``catalog``.

    Args:
        inputs: Declaration inputs
        catalog: Provider of available versions per (platform, engine)
        platform: Platform name, opaque to resolution
        matcher: Matcher to use; defaults to the standard stable/head policy
        after_resolve_hook: Called with platform, engine and version once resolved

    Returns:
        ResolutionResult

    Raises:
        ResolutionError: on any failure; nothing is retried
    """
    matcher = matcher or VersionMatcher()
    spec, source = parse_declaration(inputs, matcher.is_head)

    engine_versions = catalog.get_available_versions(platform, spec.engine)
    version = matcher.validate(platform, engine_versions, spec.engine, spec.version_prefix)

    result = ResolutionResult(
        platform=platform,
        engine=spec.engine,
        version=version,
        requested=spec.version_prefix,
        source=source,
    )
    if is_debug_enabled(logger):
        logger.debug(
            "Resolution finished",
            extra=extra_context(
                event="resolve",
                component="core",
                source=source.value,
                target=f"{spec.engine}-{version}",
                outcome="success",
            ),
        )

    if callable(after_resolve_hook):
        after_resolve_hook({"platform": platform, "engine": spec.engine, "version": version})
    return result


def format_result(result: ResolutionResult, fmt: str) -> str:
    """Render a result as ``engine-version`` text or JSON."""
    if fmt == "json":
        return json.dumps(result.to_dict(), indent=2)
    return f"{result.engine}-{result.version}"


def write_output(text: str, path: str) -> None:
    """Write the rendered result to ``path``."""
    try:
        with open(path, "w", encoding="utf-8") as file:
            file.write(text + "\n")
        logging.info("Result written to %s", path)
    except OSError as e:
        logging.error("Failed to write output to %s: %s", path, e)
        sys.exit(ExitCodes.FILE_ERROR.value)


def _exit_code_for(error: Exception) -> int:
    if isinstance(error, ConfigurationError):
        return ExitCodes.CONFIG_ERROR.value
    if isinstance(error, (DeclarationFileNotFoundError, MalformedDeclarationError)):
        return ExitCodes.FILE_ERROR.value
    return ExitCodes.RESOLUTION_ERROR.value


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)

    configure_logging("CRITICAL" if args.QUIET else args.LOG_LEVEL)
    if args.LOG_FILE:
        add_file_handler(args.LOG_FILE)

    logging.info("Arguments parsed.")

    try:
        config = load_config(
            args.CONFIG,
            args.WORKING_DIRECTORY or Constants.DEFAULT_WORKING_DIRECTORY,
        )
        inputs = build_inputs(args, config)

        catalog_path = get_setting(args, config, "CATALOG")
        if not catalog_path:
            raise ConfigurationError("A version catalog is required, pass --catalog")
        catalog = VersionCatalog.from_file(str(catalog_path))

        platform = get_setting(args, config, "PLATFORM") or get_platform_name()
        if not platform:
            raise ConfigurationError("Could not detect the platform, pass --platform")

        result = resolve_ruby(inputs, catalog, str(platform))
    except ResolutionError as e:
        logging.error("%s", e)
        sys.exit(_exit_code_for(e))
    except OSError as e:
        logging.error("IO error: %s, aborting", e)
        sys.exit(ExitCodes.FILE_ERROR.value)

    logging.info("Resolved %s-%s on %s", result.engine, result.version, result.platform)

    text = format_result(result, args.OUTPUT_FORMAT)
    if args.OUTPUT:
        write_output(text, args.OUTPUT)
    elif not args.QUIET:
        print(text)

    sys.exit(ExitCodes.SUCCESS.value)

if __name__ == "__main__":
    main()
