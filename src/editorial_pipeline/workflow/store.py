"""Persistence for workflow records.

Each bundle keeps its workflow record in ``_workflow.json``. Saves are
guarded by a revision check so two editors advancing the same article
cannot silently overwrite each other.
"""

import json
import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from editorial_pipeline.exceptions import EditorialError, StaleRevisionError
from schemas.workflow import WorkflowRecord, WorkflowState

from .state_machine import WorkflowStateMachine

logger = logging.getLogger(__name__)

WORKFLOW_FILENAME = "_workflow.json"
LOCK_SUFFIX = ".lock"


class WorkflowStore:
    """Load and save workflow records beside their bundles."""

    def __init__(self, filename: str = WORKFLOW_FILENAME):
        self.filename = filename

    def path_for(self, bundle_path: Path) -> Path:
        return bundle_path / self.filename

    def load(self, bundle_path: Path, slug: str) -> WorkflowRecord:
        """Load the workflow record for a bundle.

        Args:
            bundle_path: Bundle directory
            slug: Article slug, used for a new record

        Returns:
            The stored record, or a fresh record in the initial state
        """
        record_path = self.path_for(bundle_path)
        if not record_path.exists():
            logger.debug(f"No workflow record at {record_path}; starting at proposed")
            return WorkflowRecord(slug=slug)

        try:
            data = json.loads(record_path.read_text())
            record = WorkflowRecord.model_validate(data)
        except ValueError as e:
            raise EditorialError(f"Corrupt workflow record {record_path}: {e}") from e

        if record.slug != slug:
            logger.warning(
                f"Workflow record {record_path} belongs to {record.slug}, not {slug}"
            )
        return record

    def lock_path_for(self, bundle_path: Path) -> Path:
        return bundle_path / f"{self.filename}{LOCK_SUFFIX}"

    @contextmanager
    def _locked(self, bundle_path: Path) -> Iterator[None]:
        """Hold the bundle's workflow lock file for the duration of a save."""
        lock_path = self.lock_path_for(bundle_path)
        try:
            fd = os.open(lock_path, os.O_CREAT | os.O_EXCL | os.O_WRONLY)
        except FileExistsError:
            raise EditorialError(
                f"Workflow record in {bundle_path} is locked by another writer "
                f"(remove {lock_path.name} if no save is in progress)"
            ) from None
        os.close(fd)
        try:
            yield
        finally:
            lock_path.unlink(missing_ok=True)

    def current_revision(self, bundle_path: Path) -> int:
        record_path = self.path_for(bundle_path)
        if not record_path.exists():
            return 0
        try:
            revision = json.loads(record_path.read_text()).get("revision", 0)
        except (ValueError, AttributeError) as e:
            raise EditorialError(f"Corrupt workflow record {record_path}: {e}") from e
        if not isinstance(revision, int):
            raise EditorialError(f"Corrupt workflow record {record_path}: revision {revision!r}")
        return revision

    def check_revision(self, bundle_path: Path, expected_revision: int) -> None:
        """Raise StaleRevisionError if the stored revision has moved on."""
        actual = self.current_revision(bundle_path)
        if actual != expected_revision:
            raise StaleRevisionError(expected_revision, actual)

    def save(self, bundle_path: Path, record: WorkflowRecord, expected_revision: int) -> None:
        """Write a record if nobody else has written since it was loaded.

        The revision check and the write happen while holding the bundle's
        lock file, so two writers cannot both pass the check.

        Args:
            bundle_path: Bundle directory
            record: The updated record
            expected_revision: Revision the record had when it was loaded

        Raises:
            StaleRevisionError: If the stored revision differs from expected_revision
            EditorialError: If another writer holds the lock
        """
        record_path = self.path_for(bundle_path)
        with self._locked(bundle_path):
            self.check_revision(bundle_path, expected_revision)

            tmp_path = record_path.with_suffix(".tmp")
            tmp_path.write_text(record.model_dump_json(indent=2, exclude_none=True))
            tmp_path.replace(record_path)
        logger.debug(f"Saved workflow record {record_path} at revision {record.revision}")

    def advance(
        self,
        bundle_path: Path,
        slug: str,
        target: WorkflowState | str,
        expected_revision: int | None = None,
        actor: str | None = None,
        note: str | None = None,
    ) -> WorkflowRecord:
        """Load, transition and save a bundle's workflow record.

        Nothing is written if the transition is rejected.
        """
        record = self.load(bundle_path, slug)
        loaded_revision = record.revision
        machine = WorkflowStateMachine(record)
        machine.transition_to(
            target, expected_revision=expected_revision, actor=actor, note=note
        )
        self.save(bundle_path, record, expected_revision=loaded_revision)
        return record
