"""Pipeline infrastructure for bucket-based token processing.

A content bundle travels through the pipeline as a JSON token that moves
between bucket directories, one bucket per completed stage:

- Token: A unit of work with its properties and processing log
- Pipe: Moves tokens from one bucket to the next
- Filter: Base class for a processing stage
- Pipeline: Named bucket directories and the pipes between them

Within a bucket a token file is ``{id}.json`` while waiting, ``{id}.bak``
while a filter holds it, and ``{id}.err`` once a stage has failed it.
"""

import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

logger: logging.Logger = logging.getLogger(__name__)

WAITING = ".json"
IN_PROCESS = ".bak"
ERRORED = ".err"


class Token:
    """
    A bundle's unit of work in the pipeline.

    Attributes:
        content (dict): Token properties, including the id, the bundle path,
                       stage results and the processing log.
    """

    def __init__(self, content: dict):
        self.content = content

    def __repr__(self) -> str:
        return f"Token({self.name})"

    def get_prop(self, prop: str) -> Any:
        return self.content.get(prop)

    def put_prop(self, prop: str, val: Any) -> None:
        self.content[prop] = val

    @property
    def name(self) -> str | None:
        return self.get_prop("id")

    @property
    def log(self) -> list[dict]:
        return self.content.get("log", [])

    def write_log(
        self, message: str, level: Optional[str] = None, stage: Optional[str] = None
    ):
        """Add a log entry to the token's processing history.

        Args:
            message: Log message describing the event
            level: Log level (e.g., 'INFO', 'ERROR', 'WARNING')
            stage: Pipeline stage name where the event occurred
        """
        entry: dict = {"timestamp": str(datetime.now(timezone.utc)), "message": message}
        if stage:
            entry["stage"] = stage
        if level:
            entry["level"] = level

        self.content.setdefault("log", []).append(entry)


def load_token(token_file: Path) -> Token:
    """Load a token from a JSON file."""
    with token_file.open("r") as f:
        return Token(json.load(f))


def dump_token(token: Token, destination: Path) -> None:
    """Save a token to a JSON file."""
    with destination.open("w+") as f:
        json.dump(token.content, fp=f, indent=2, default=str)


class Pipe:
    """
    Moves tokens from an input bucket to an output bucket.

    Taking a token renames its file to ``.bak`` so no other process picks
    it up; putting it writes it to the output bucket (or back to the input
    bucket as ``.err``) and removes the marked file.

    Attributes:
        input: Input bucket directory path
        output: Output bucket directory path
        token: Token currently held by the pipe
    """

    def __init__(self, in_path: Path, out_path: Path) -> None:
        self.input = in_path
        self.output = out_path
        self.token: Token | None = None

    def __repr__(self) -> str:
        return f"Pipe('{self.input}', '{self.output}')"

    def _token_path(self, bucket: Path, token: Token | None, suffix: str) -> Path:
        if token is None or token.name is None:
            raise ValueError("no token or token name")
        return bucket / f"{token.name}{suffix}"

    def in_path(self, token: Token) -> Path:
        return self._token_path(self.input, token, WAITING)

    def out_path(self, token: Token) -> Path:
        return self._token_path(self.output, token, WAITING)

    def marked_path(self, token: Token) -> Path:
        return self._token_path(self.input, token, IN_PROCESS)

    def error_path(self, token: Token) -> Path:
        return self._token_path(self.input, token, ERRORED)

    def take_token(self, id: str | None = None) -> Token | None:
        """Take the next waiting token from the input bucket.

        Args:
            id: Optional specific token id to take. If None, takes the first
                waiting token in name order.

        Returns:
            The taken token, or None if no token is available
        """
        if self.token is not None:
            logger.error(f"{self} already holds {self.token}")
            return None

        if id is None:
            waiting = sorted(self.input.glob(f"*{WAITING}"))
            if not waiting:
                return None
            token_path = waiting[0]
        else:
            token_path = self.input / f"{id}{WAITING}"
            if not token_path.is_file():
                logger.error(f"{token_path} does not exist")
                return None

        self.token = load_token(token_path)
        self.mark_token()
        return self.token

    def mark_token(self) -> None:
        """Rename the held token's file to mark it as in process."""
        if self.token is None:
            return
        unmarked_path = self.in_path(self.token)
        if not unmarked_path.is_file():
            raise FileNotFoundError(f"{unmarked_path} does not exist")
        unmarked_path.rename(self.marked_path(self.token))

    def delete_marked_token(self) -> None:
        if self.token is not None:
            self.marked_path(self.token).unlink(missing_ok=True)

    def put_token(self, error_flag: bool = False) -> None:
        """Release the held token to the output bucket, or to ``.err``."""
        if self.token is None:
            return
        if error_flag:
            dump_token(self.token, self.error_path(self.token))
        else:
            dump_token(self.token, self.out_path(self.token))
        self.delete_marked_token()
        self.token = None

    def put_token_back(self, error_flag: bool = False) -> None:
        """Return the held token to the input bucket unprocessed."""
        if self.token is None:
            return
        if error_flag:
            dump_token(self.token, self.error_path(self.token))
        else:
            dump_token(self.token, self.in_path(self.token))
        self.delete_marked_token()
        self.token = None


class Filter(ABC):
    """
    Base class for pipeline processing stages.

    Subclasses implement validate_token() and process_token(). A token that
    fails validation, is not processed, or raises is written back to the
    input bucket as ``.err`` with the reason in its log and ``error`` prop.

    Attributes:
        pipe: The pipe for token input/output operations
        stage_name: Name of the processing stage for logging
    """

    def __init__(self, pipe: Pipe):
        self.pipe = pipe
        self.stage_name: str = self.__class__.__name__.lower()

        self._recover_orphaned_tokens()

    def log_to_token(self, token: Token, level: str, message: str) -> None:
        token.write_log(message, level, self.stage_name)

    def _recover_orphaned_tokens(self) -> None:
        """Turn ``.bak`` files left by an interrupted run back into waiting tokens."""
        for bak_file in self.pipe.input.glob(f"*{IN_PROCESS}"):
            json_file = bak_file.with_suffix(WAITING)
            logger.warning(
                f"{self.stage_name}: Recovering orphaned token: "
                f"{bak_file.name} -> {json_file.name}"
            )
            bak_file.rename(json_file)

    def _fail(self, token: Token, message: str) -> None:
        token.put_prop("error", message)
        self.log_to_token(token, "ERROR", message)
        logger.error(f"{self.stage_name}: {token.name}: {message}")
        self.pipe.put_token(error_flag=True)

    def run_once(self, id: str | None = None) -> bool:
        """Process a single token if one is waiting.

        Args:
            id: Optional token id to process. If None, takes the first
                waiting token in name order.

        Returns:
            True if a token was processed successfully, False if no token
            was waiting or the token ended up in the error state
        """
        token: Token | None = self.pipe.take_token(id=id)
        if not token:
            return False

        if not self.validate_token(token):
            self._fail(token, "Token did not validate")
            return False

        try:
            processed: bool = self.process_token(token)
        except Exception as e:
            self._fail(token, f"in {self.stage_name}: {e}")
            return False

        if not processed:
            self._fail(token, "Stage did not run successfully")
            return False

        logger.debug(f"{self.stage_name}: processed token {token.name}")
        self.log_to_token(token, "INFO", "Stage completed successfully")
        self.pipe.put_token()
        return True

    @abstractmethod
    def validate_token(self, token: Token) -> bool:
        """Check that a token carries what this stage needs."""

    @abstractmethod
    def process_token(self, token: Token) -> bool:
        """Run this stage on a token; return True on success."""


class Pipeline:
    """
    Named bucket directories and the pipes between them.

    Attributes:
        buckets: Mapping of bucket names to Path objects
    """

    def __init__(self):
        self.buckets: dict[str, Path] = {}

    def add_bucket(self, name: str, location: Path) -> None:
        self.buckets[name] = location

    def bucket(self, name: str) -> Path:
        """Get a bucket path by name.

        Raises:
            ValueError: If the bucket doesn't exist
        """
        if p := self.buckets.get(name):
            return p
        raise ValueError(f"no such bucket: {name}")

    def pipe(self, in_bucket: str, out_bucket: str) -> Pipe:
        return Pipe(self.bucket(in_bucket), self.bucket(out_bucket))

    @property
    def snapshot(self) -> dict:
        """Waiting, errored and in-process token files per bucket."""
        return {
            name: {
                "waiting_tokens": sorted(f.name for f in location.glob(f"*{WAITING}")),
                "errored_tokens": sorted(f.name for f in location.glob(f"*{ERRORED}")),
                "in_process_tokens": sorted(f.name for f in location.glob(f"*{IN_PROCESS}")),
            }
            for name, location in self.buckets.items()
        }
