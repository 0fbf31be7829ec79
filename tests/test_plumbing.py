"""Tests for pipeline infrastructure."""

import json

import pytest

from editorial_pipeline.pipeline import Filter, Pipe, Pipeline, Token, dump_token, load_token


class PassFilter(Filter):
    def validate_token(self, token):
        return True

    def process_token(self, token):
        token.put_prop("processed", True)
        return True


@pytest.fixture
def pipe(tmp_buckets):
    return Pipe(tmp_buckets["submitted"], tmp_buckets["validated"])


def _seed(bucket, token_id, **props):
    (bucket / f"{token_id}.json").write_text(json.dumps({"id": token_id, **props}))


class TestToken:
    """Tests for Token class."""

    def test_token_name_returns_id(self):
        """Token.name returns the 'id' field."""
        token = Token({"id": "zeitwerk"})
        assert token.name == "zeitwerk"

    def test_token_name_returns_none_when_no_id(self):
        assert Token({"bundle_path": "/tmp"}).name is None

    def test_token_props(self):
        """get_prop and put_prop read and write content."""
        token = Token({"id": "zeitwerk"})
        token.put_prop("slug", "ruby-code-loader-zeitwerk")

        assert token.get_prop("slug") == "ruby-code-loader-zeitwerk"
        assert token.get_prop("missing") is None

    def test_token_repr(self):
        assert repr(Token({"id": "zeitwerk"})) == "Token(zeitwerk)"

    def test_token_write_log(self):
        """write_log appends a timestamped entry."""
        token = Token({"id": "zeitwerk"})
        assert token.log == []

        token.write_log("Validated", level="INFO", stage="validatefilter")

        entry = token.log[0]
        assert entry["message"] == "Validated"
        assert entry["level"] == "INFO"
        assert entry["stage"] == "validatefilter"
        assert "timestamp" in entry


class TestLoadDumpToken:
    """Tests for token serialization."""

    def test_round_trip(self, tmp_path):
        token = Token({"id": "zeitwerk", "violations": [{"rule": "table", "line": 3}]})
        dest = tmp_path / "zeitwerk.json"

        dump_token(token, dest)

        assert load_token(dest).content == token.content


class TestPipe:
    """Tests for Pipe class."""

    def test_take_token_marks_it(self, pipe, tmp_buckets):
        """take_token renames the file to .bak."""
        _seed(tmp_buckets["submitted"], "zeitwerk")

        token = pipe.take_token()

        assert token.name == "zeitwerk"
        assert pipe.token is token
        assert not (tmp_buckets["submitted"] / "zeitwerk.json").exists()
        assert (tmp_buckets["submitted"] / "zeitwerk.bak").exists()

    def test_take_token_by_id(self, pipe, tmp_buckets):
        _seed(tmp_buckets["submitted"], "first")
        _seed(tmp_buckets["submitted"], "second")

        assert pipe.take_token(id="second").name == "second"

    def test_take_token_in_name_order(self, pipe, tmp_buckets):
        _seed(tmp_buckets["submitted"], "b")
        _seed(tmp_buckets["submitted"], "a")

        assert pipe.take_token().name == "a"

    def test_take_token_when_empty(self, pipe):
        assert pipe.take_token() is None

    def test_take_unknown_id(self, pipe):
        assert pipe.take_token(id="nope") is None

    def test_take_token_while_holding(self, pipe, tmp_buckets):
        """A pipe holds at most one token."""
        _seed(tmp_buckets["submitted"], "a")
        _seed(tmp_buckets["submitted"], "b")
        pipe.take_token()

        assert pipe.take_token() is None

    def test_put_token(self, pipe, tmp_buckets):
        """put_token moves the token to the output bucket."""
        _seed(tmp_buckets["submitted"], "zeitwerk")
        pipe.take_token()

        pipe.put_token()

        assert not (tmp_buckets["submitted"] / "zeitwerk.bak").exists()
        assert (tmp_buckets["validated"] / "zeitwerk.json").exists()
        assert pipe.token is None

    def test_put_token_with_error(self, pipe, tmp_buckets):
        """put_token with error_flag leaves a .err file in the input bucket."""
        _seed(tmp_buckets["submitted"], "zeitwerk")
        pipe.take_token()

        pipe.put_token(error_flag=True)

        assert (tmp_buckets["submitted"] / "zeitwerk.err").exists()
        assert not (tmp_buckets["validated"] / "zeitwerk.json").exists()

    def test_put_token_back(self, pipe, tmp_buckets):
        _seed(tmp_buckets["submitted"], "zeitwerk")
        pipe.take_token()

        pipe.put_token_back()

        assert (tmp_buckets["submitted"] / "zeitwerk.json").exists()
        assert not (tmp_buckets["submitted"] / "zeitwerk.bak").exists()

    def test_paths_require_token(self, pipe):
        with pytest.raises(ValueError, match="no token"):
            pipe.in_path(Token({}))


class TestFilter:
    """Tests for Filter base class."""

    def test_filter_requires_implementation(self, pipe):
        """A subclass missing the abstract methods cannot be instantiated."""

        class IncompleteFilter(Filter):
            pass

        with pytest.raises(TypeError):
            IncompleteFilter(pipe)

    def test_filter_recovers_orphaned_tokens(self, pipe, tmp_buckets):
        """Filter turns .bak files from an interrupted run back into .json."""
        (tmp_buckets["submitted"] / "orphan.bak").write_text(json.dumps({"id": "orphan"}))

        PassFilter(pipe)

        assert (tmp_buckets["submitted"] / "orphan.json").exists()
        assert not (tmp_buckets["submitted"] / "orphan.bak").exists()

    def test_run_once_processes_token(self, pipe, tmp_buckets):
        _seed(tmp_buckets["submitted"], "zeitwerk")

        assert PassFilter(pipe).run_once() is True

        data = json.loads((tmp_buckets["validated"] / "zeitwerk.json").read_text())
        assert data["processed"] is True
        assert data["log"][-1]["message"] == "Stage completed successfully"
        assert data["log"][-1]["stage"] == "passfilter"

    def test_run_once_by_id(self, pipe, tmp_buckets):
        """run_once with an id leaves other waiting tokens alone."""
        _seed(tmp_buckets["submitted"], "aaa-other")
        _seed(tmp_buckets["submitted"], "zeitwerk")

        assert PassFilter(pipe).run_once("zeitwerk") is True

        assert (tmp_buckets["validated"] / "zeitwerk.json").exists()
        assert (tmp_buckets["submitted"] / "aaa-other.json").exists()

    def test_run_once_unknown_id(self, pipe, tmp_buckets):
        _seed(tmp_buckets["submitted"], "aaa-other")

        assert PassFilter(pipe).run_once("zeitwerk") is False
        assert (tmp_buckets["submitted"] / "aaa-other.json").exists()

    def test_run_once_without_tokens(self, pipe):
        assert PassFilter(pipe).run_once() is False

    def test_invalid_token_goes_to_error(self, pipe, tmp_buckets):
        class RejectFilter(PassFilter):
            def validate_token(self, token):
                return False

        _seed(tmp_buckets["submitted"], "zeitwerk")

        assert RejectFilter(pipe).run_once() is False

        data = json.loads((tmp_buckets["submitted"] / "zeitwerk.err").read_text())
        assert data["error"] == "Token did not validate"

    def test_exception_goes_to_error(self, pipe, tmp_buckets):
        """An exception during processing is recorded on the token."""

        class BrokenFilter(PassFilter):
            def process_token(self, token):
                raise RuntimeError("disk full")

        _seed(tmp_buckets["submitted"], "zeitwerk")

        assert BrokenFilter(pipe).run_once() is False

        data = json.loads((tmp_buckets["submitted"] / "zeitwerk.err").read_text())
        assert "disk full" in data["error"]
        assert data["log"][-1]["level"] == "ERROR"

    def test_unprocessed_token_goes_to_error(self, pipe, tmp_buckets):
        class LazyFilter(PassFilter):
            def process_token(self, token):
                return False

        _seed(tmp_buckets["submitted"], "zeitwerk")

        assert LazyFilter(pipe).run_once() is False
        assert (tmp_buckets["submitted"] / "zeitwerk.err").exists()


class TestPipeline:
    """Tests for Pipeline class."""

    def test_pipeline_creation(self):
        assert Pipeline().buckets == {}

    def test_bucket_raises_for_unknown(self):
        with pytest.raises(ValueError, match="no such bucket"):
            Pipeline().bucket("nonexistent")

    def test_pipe_between_buckets(self, tmp_buckets):
        pipeline = Pipeline()
        pipeline.add_bucket("submitted", tmp_buckets["submitted"])
        pipeline.add_bucket("validated", tmp_buckets["validated"])

        pipe = pipeline.pipe("submitted", "validated")

        assert pipe.input == tmp_buckets["submitted"]
        assert pipe.output == tmp_buckets["validated"]

    def test_snapshot(self, tmp_buckets):
        pipeline = Pipeline()
        pipeline.add_bucket("submitted", tmp_buckets["submitted"])
        _seed(tmp_buckets["submitted"], "a")
        (tmp_buckets["submitted"] / "b.err").write_text("{}")

        snapshot = pipeline.snapshot

        assert snapshot["submitted"] == {
            "waiting_tokens": ["a.json"],
            "errored_tokens": ["b.err"],
            "in_process_tokens": [],
        }
