"""depscout - Maven dependency version scout.

Loads a project's pom.xml, looks up every declared dependency in the local
repository and the configured remote repositories, and reports available
versions, upgrades and declared-version conflicts.

    Returns:
        int: Exit code
"""
import logging
import sys

from args import parse_args
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from cli_config import apply_config, load_config, repositories_from_config
from constants import Constants, ExitCodes
from registry.maven.pom import PomLoadError, load_project
from registry.maven.repositories import RepositoryConfigError, build_registry
from registry.maven.settings import discover_repositories, resolve_local_repository
from report import export_json, print_report, render_lookup, render_report
from versioning.models import parse_coordinate
from versioning.ordering import resolve_ordering
from versioning.service import VersionLookupService

logger = logging.getLogger(__name__)


def setup_logging(args) -> None:
    """Configure logging from --loglevel and --logfile."""
    configure_logging(getattr(args, "LOG_LEVEL", None))

    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
        logging.getLogger().addHandler(file_handler)
        logger.info("Logging to file: %s", log_file)


def apply_cli_overrides(args) -> None:
    """CLI flags take precedence over config file values."""
    if getattr(args, "TIMEOUT", None) is not None:
        Constants.FANOUT_TIMEOUT = float(args.TIMEOUT)
    if getattr(args, "ORDERING", None):
        Constants.ORDERING = resolve_ordering(args.ORDERING)


def load_tree(path):
    """Read a rendered dependency tree report, exiting on I/O errors."""
    if not path:
        return None
    try:
        with open(path, encoding="utf-8") as file:
            return file.read()
    except OSError as e:
        logging.error("Dependency tree couldn't be read: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)


def resolve_local_root(args, cfg):
    if getattr(args, "NO_LOCAL", False):
        return None
    return args.LOCAL_REPO or cfg.get("local_repository") or resolve_local_repository()


def build_service(args, cfg, project=None):
    """Assemble the repository registry and lookup service for a run.

    Repositories declared by ``project`` are included when one is given.
    """
    local_root = resolve_local_root(args, cfg)
    extra = repositories_from_config(cfg)
    if not getattr(args, "NO_SETTINGS", False):
        extra.extend(discover_repositories())
    if project is not None:
        extra.extend(project.repositories)
    registry = build_registry(
        local_root=local_root,
        extra=extra,
        include_defaults=bool(cfg.get("include_defaults", True)),
    )
    return VersionLookupService(registry, local_root=local_root, ordering=Constants.ORDERING)


def run_lookup(args, cfg):
    """Single-coordinate mode: report every version of one artifact and exit."""
    record = parse_coordinate(args.COORDINATE)
    try:
        service = build_service(args, cfg)
    except RepositoryConfigError as e:
        logging.error("Invalid repository configuration: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)

    view = service.lookup(record.coordinate)
    if record.needs_lookup:
        service.enrich(record, view)
    elif view.found:
        record.available_versions = list(view.merged_versions)
        record.latest_version = view.global_latest
    else:
        logger.warning("No versions found in any repository for %s", record.coordinate)

    if not args.QUIET:
        print_report("\n".join(render_lookup(view, record, Constants.ORDERING)))
    if args.OUTPUT:
        export_json([record], args.OUTPUT)
    sys.exit(ExitCodes.SUCCESS.value)


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    setup_logging(args)

    cfg = load_config(getattr(args, "CONFIG", None))
    apply_config(cfg)
    apply_cli_overrides(args)

    if is_debug_enabled(logger):
        logger.debug("CLI start", extra=extra_context(event="function_entry", component="cli", action="main"))

    if args.COORDINATE:
        run_lookup(args, cfg)

    pom_path = args.POM_FILE or args.FROM_SRC
    try:
        project = load_project(pom_path)
    except PomLoadError as e:
        logging.error("%s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)
    tree = load_tree(getattr(args, "TREE_FILE", None))

    try:
        service = build_service(args, cfg, project)
    except RepositoryConfigError as e:
        logging.error("Invalid repository configuration: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)

    logger.info("Local repository: %s", service.local_root)
    for repo in service.registry.remotes():
        logger.info("Remote repository: %s (%s)", repo.display_name, repo.url)

    views = service.analyze_project(project, tree)

    if not args.QUIET:
        print_report(render_report(project, views, Constants.ORDERING))
    if args.OUTPUT:
        export_json(project.all_dependencies(), args.OUTPUT)

    if args.ERROR_ON_WARNINGS and project.dependencies_with_conflicts():
        logger.warning("Conflicting dependency versions found.")
        sys.exit(ExitCodes.EXIT_WARNINGS.value)
    sys.exit(ExitCodes.SUCCESS.value)


if __name__ == "__main__":
    main()
