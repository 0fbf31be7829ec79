"""Pytest fixtures for editorial pipeline tests."""

import pytest

from editorial_pipeline.workflow import WorkflowStore

SAMPLE_SLUG = "ruby-code-loader-zeitwerk"

SAMPLE_DATASHEET = """\
# Blog Post Datasheet
# This should be filled out for every new blog post that we will be promoting.

title: >-
  Code Loaders in Ruby: Understanding Zeitwerk

path: ruby-code-loader-zeitwerk

author: olasubomioluwalana

tags: ruby

publish-on: 02-22-2021

marketing-notes:
  eli5: >-
    Code loaders pull in the files an app needs so the programmer can focus on the code.

  who: Intermediate and advanced rails developers

  what: >-
    It teaches them all about code loaders

  why: >-
    Code loaders are a central part of the magic behind rails.

  msc: >-
    TODO

short-description: >-
  What makes Rails magical? It just might be its code loader. In this article,
  Olasubomi introduces us to Zeitwerk and shows us how to integrate it with our
  own projects.
"""

SAMPLE_BODY = """\
# Code Loaders in Ruby: Understanding Zeitwerk

Code loaders let you use a class without requiring the file that defines it.

## What is a code loader?

- Autoloading
- Eager loading
- Reloading

### Setting up Zeitwerk

![Zeitwerk resolving a constant](zeitwerk.png)
*Zeitwerk maps file names to constants.*

```ruby
loader = Zeitwerk::Loader.new
#### not a heading inside a code block
loader.setup
```

Read more in the [Zeitwerk README](https://github.com/fxn/zeitwerk).
"""


@pytest.fixture
def sample_datasheet():
    """Sample sidecar record, as parsed from the YAML datasheet."""
    return {
        "title": "Code Loaders in Ruby: Understanding Zeitwerk",
        "path": SAMPLE_SLUG,
        "author": "olasubomioluwalana",
        "tags": "ruby",
        "publish-on": "02-22-2021",
        "marketing-notes": {
            "eli5": "Code loaders pull in the files an app needs.",
            "who": "Intermediate and advanced rails developers",
            "what": "It teaches them all about code loaders",
            "why": "Code loaders are a central part of the magic behind rails.",
            "msc": "TODO",
        },
        "short-description": "What makes Rails magical? It just might be its code loader.",
    }


@pytest.fixture
def sample_body():
    return SAMPLE_BODY


@pytest.fixture
def sample_bundle(tmp_path):
    """A content bundle directory with a datasheet and a conformant body."""
    bundle = tmp_path / "articles" / "code-loaders-in-ruby-understanding-zeitwerk"
    bundle.mkdir(parents=True)
    (bundle / "_datasheet.yml").write_text(SAMPLE_DATASHEET)
    (bundle / "article.md").write_text(SAMPLE_BODY)
    return bundle


@pytest.fixture
def approved_bundle(sample_bundle):
    """The sample bundle, advanced through the workflow to approved."""
    store = WorkflowStore()
    for target in ("drafting", "in-review", "editing", "approved"):
        store.advance(sample_bundle, SAMPLE_SLUG, target, actor="editor")
    return sample_bundle


@pytest.fixture
def tmp_buckets(tmp_path):
    """Create temporary bucket directories for pipeline testing."""
    buckets = {
        "submitted": tmp_path / "01_submitted",
        "validated": tmp_path / "02_validated",
        "linted": tmp_path / "03_linted",
        "exported": tmp_path / "04_exported",
    }
    for bucket in buckets.values():
        bucket.mkdir(parents=True)
    return buckets
