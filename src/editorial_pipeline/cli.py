"""Command-line interface for editorial-pipeline."""

import argparse
import logging
import sys
from pathlib import Path

from editorial_pipeline.config import EditorialConfig, load_config
from editorial_pipeline.exceptions import EditorialError
from editorial_pipeline.exporters import PublicationExporter
from editorial_pipeline.linters import StyleLinter
from editorial_pipeline.loaders import BundleLoader
from editorial_pipeline.pipeline.orchestrator import Orchestrator
from editorial_pipeline.workflow import WorkflowStore
from schemas.workflow import WorkflowState

DEFAULT_EXPORT_DIR = Path("./workspace/exports")
DEFAULT_WORKSPACE_DIR = Path("./workspace/pipeline")


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the CLI."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def _config(args: argparse.Namespace) -> EditorialConfig:
    return load_config(args.config)


def _bundle_path(args: argparse.Namespace, logger: logging.Logger) -> Path | None:
    bundle_path = args.bundle.resolve()
    if not bundle_path.is_dir():
        logger.error(f"Bundle directory not found: {bundle_path}")
        return None
    return bundle_path


def validate(args: argparse.Namespace) -> int:
    """Execute the validate command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    bundle_path = _bundle_path(args, logger)
    if bundle_path is None:
        return 1

    try:
        article = BundleLoader(_config(args)).load(bundle_path)
    except EditorialError as e:
        logger.error(f"Invalid bundle: {e}")
        return 1

    logger.info(f"Valid bundle: {article.slug}")
    logger.info(f"  Title: {article.metadata.title}")
    logger.info(f"  Author: {article.author}")
    logger.info(f"  Tags: {', '.join(article.metadata.tags)}")
    logger.info(f"  Publish on: {article.metadata.publish_on.isoformat()}")
    logger.info(f"  Body: {article.body_filename}")
    return 0


def lint(args: argparse.Namespace) -> int:
    """Execute the lint command.

    Returns 1 when any error-severity violation is found; warnings alone
    leave the exit code at 0.
    """
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    bundle_path = _bundle_path(args, logger)
    if bundle_path is None:
        return 1

    try:
        config = _config(args)
        loader = BundleLoader(config)
        body_path = loader.find_body(bundle_path)
        body = loader.read_body(body_path)
    except EditorialError as e:
        logger.error(f"Cannot lint bundle: {e}")
        return 1

    linter = StyleLinter(
        strict=args.strict or config.strict,
        max_heading_level=config.max_heading_level,
    )
    report = linter.lint(body)

    errors = 0
    for violation in report:
        if violation.severity == "error":
            errors += 1
            logger.error(f"{body_path.name}: {violation}")
        else:
            logger.warning(f"{body_path.name}: {violation}")

    if errors:
        logger.info(f"{body_path.name}: {errors} style error(s)")
        return 1

    logger.info(f"{body_path.name}: conforms to the style guide")
    return 0


def status(args: argparse.Namespace) -> int:
    """Execute the status command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    bundle_path = _bundle_path(args, logger)
    if bundle_path is None:
        return 1

    try:
        article = BundleLoader(_config(args)).load(bundle_path)
    except EditorialError as e:
        logger.error(f"Invalid bundle: {e}")
        return 1

    record = article.workflow
    logger.info(f"{record.slug}: {record.state.value} (revision {record.revision})")
    for transition in record.history:
        who = f" by {transition.actor}" if transition.actor else ""
        note = f": {transition.note}" if transition.note else ""
        logger.info(
            f"  {transition.timestamp.isoformat()} "
            f"{transition.from_state.value} -> {transition.to_state.value}{who}{note}"
        )
    return 0


def advance(args: argparse.Namespace) -> int:
    """Execute the advance command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    bundle_path = _bundle_path(args, logger)
    if bundle_path is None:
        return 1

    if args.to == WorkflowState.PUBLISHED.value:
        logger.error("Use the export command to publish an approved article")
        return 1

    try:
        loader = BundleLoader(_config(args))
        article = loader.load(bundle_path)
        record = loader.store.advance(
            bundle_path,
            article.slug,
            args.to,
            expected_revision=args.revision,
            actor=args.actor,
            note=args.note,
        )
    except EditorialError as e:
        logger.error(f"Cannot advance {bundle_path.name}: {e}")
        return 1

    logger.info(f"{record.slug}: now {record.state.value} (revision {record.revision})")
    return 0


def export(args: argparse.Namespace) -> int:
    """Execute the export command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    bundle_path = _bundle_path(args, logger)
    if bundle_path is None:
        return 1

    output_dir = args.output
    output_dir.mkdir(parents=True, exist_ok=True)

    try:
        article = BundleLoader(_config(args)).load(bundle_path)
        exporter = PublicationExporter(output_dir, store=WorkflowStore())
        bundle = exporter.export(article, expected_revision=args.revision)
    except EditorialError as e:
        logger.error(f"Failed to export {bundle_path.name}: {e}")
        return 1

    logger.info(f"Exported: {bundle.slug}")
    logger.info(f"  Title: {bundle.metadata.title}")
    logger.info(f"  Output: {exporter.bundle_path(bundle.slug)}")
    return 0


def run_pipeline(args: argparse.Namespace) -> int:
    """Execute the run-pipeline command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 when the bundle was exported, non-zero otherwise)
    """
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    bundle_path = _bundle_path(args, logger)
    if bundle_path is None:
        return 1

    output_dir = args.output
    output_dir.mkdir(parents=True, exist_ok=True)
    workspace = args.workspace or DEFAULT_WORKSPACE_DIR
    workspace.mkdir(parents=True, exist_ok=True)

    try:
        orchestrator = Orchestrator(
            workspace=workspace, export_output=output_dir, config=_config(args)
        )
        token = orchestrator.run(bundle_path)
    except EditorialError as e:
        logger.error(f"Pipeline failed: {e}")
        return 1

    state = token.get_prop("state") or "unknown"
    violations = token.get_prop("violations") or []
    error = token.get_prop("error")

    logger.info(f"Pipeline complete for {bundle_path.name}")
    logger.info(f"  State: {state}")
    if token.get_prop("export_path"):
        logger.info(f"  Output: {token.get_prop('export_path')}")
    if violations:
        logger.warning(f"  Style violations: {len(violations)}")
        for v in violations:
            logger.warning(f"    - line {v['line']}: [{v['rule']}] {v['message']}")
    if error:
        logger.error(f"  Error: {error}")

    return 0 if state == WorkflowState.PUBLISHED.value and not error else 1


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = argparse.ArgumentParser(
        prog="editorial-pipeline",
        description="Validate, track and export blog article bundles",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML configuration file (default: built-in settings)",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
    )

    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate a bundle's layout and sidecar metadata",
        description="Check that a content bundle has one body and one sidecar, and that the sidecar carries every required field.",
    )
    validate_parser.add_argument(
        "--bundle",
        type=Path,
        required=True,
        help="Path to the content bundle directory",
    )
    validate_parser.set_defaults(func=validate)

    lint_parser = subparsers.add_parser(
        "lint",
        help="Check a bundle's body against the style guide",
        description="Report headings, nested lists, tables, inline images and footnotes that fall outside the blog's markdown subset.",
    )
    lint_parser.add_argument(
        "--bundle",
        type=Path,
        required=True,
        help="Path to the content bundle directory",
    )
    lint_parser.add_argument(
        "--strict",
        action="store_true",
        help="Limit headings to H2",
    )
    lint_parser.set_defaults(func=lint)

    status_parser = subparsers.add_parser(
        "status",
        help="Show a bundle's workflow state and history",
        description="Show the editorial stage, revision and transition history of a content bundle.",
    )
    status_parser.add_argument(
        "--bundle",
        type=Path,
        required=True,
        help="Path to the content bundle directory",
    )
    status_parser.set_defaults(func=status)

    advance_parser = subparsers.add_parser(
        "advance",
        help="Move a bundle to its next editorial stage",
        description="Record a workflow transition for a content bundle. Use --to drafting from in-review to request changes.",
    )
    advance_parser.add_argument(
        "--bundle",
        type=Path,
        required=True,
        help="Path to the content bundle directory",
    )
    advance_parser.add_argument(
        "--to",
        required=True,
        choices=WorkflowState.values(),
        help="Target workflow state",
    )
    advance_parser.add_argument(
        "--revision",
        type=int,
        default=None,
        help="Revision you last saw; the transition is rejected if it has changed",
    )
    advance_parser.add_argument(
        "--actor",
        type=str,
        default=None,
        help="Who is making the transition",
    )
    advance_parser.add_argument(
        "--note",
        type=str,
        default=None,
        help="Note to store with the transition",
    )
    advance_parser.set_defaults(func=advance)

    export_parser = subparsers.add_parser(
        "export",
        help="Export an approved bundle and mark it published",
        description="Write normalized metadata and body for the publishing collaborator and advance the bundle to published.",
    )
    export_parser.add_argument(
        "--bundle",
        type=Path,
        required=True,
        help="Path to the content bundle directory",
    )
    export_parser.add_argument(
        "--output",
        type=Path,
        default=DEFAULT_EXPORT_DIR,
        help=f"Output directory for export bundles (default: {DEFAULT_EXPORT_DIR})",
    )
    export_parser.add_argument(
        "--revision",
        type=int,
        default=None,
        help="Revision you last saw; the export is rejected if it has changed",
    )
    export_parser.set_defaults(func=export)

    pipeline_parser = subparsers.add_parser(
        "run-pipeline",
        help="Validate, lint and export a bundle in one run",
        description="Run a content bundle through the validate, lint and export stages of the bucket pipeline.",
    )
    pipeline_parser.add_argument(
        "--bundle",
        type=Path,
        required=True,
        help="Path to the content bundle directory",
    )
    pipeline_parser.add_argument(
        "--output",
        type=Path,
        default=DEFAULT_EXPORT_DIR,
        help=f"Output directory for export bundles (default: {DEFAULT_EXPORT_DIR})",
    )
    pipeline_parser.add_argument(
        "--workspace",
        type=Path,
        default=None,
        help=f"Pipeline workspace directory for bucket state (default: {DEFAULT_WORKSPACE_DIR})",
    )
    pipeline_parser.set_defaults(func=run_pipeline)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
