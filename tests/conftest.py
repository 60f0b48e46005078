"""Pytest configuration and shared fixtures for the tidymd test suite."""

import logging
from pathlib import Path

import pytest
from utils import FIXTURES_DIR, load_fixture_pairs

from tidymd.logging_utils import PACKAGE_LOGGER


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - full pipeline tests")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")


@pytest.fixture(autouse=True)
def restore_package_logger():
    """Undo any handlers the command line attached to the tidymd logger."""
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    saved = (package_logger.level, package_logger.propagate, list(package_logger.handlers))
    yield
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        if handler not in saved[2]:
            handler.close()
    package_logger.setLevel(saved[0])
    package_logger.propagate = saved[1]
    for handler in saved[2]:
        package_logger.addHandler(handler)


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding the golden input/expected Markdown pairs."""
    return FIXTURES_DIR


@pytest.fixture
def sample_markdown() -> str:
    """An untidy document touching most conversion rules."""
    return """Project Title
=============

Some *emphasis*, __strong__ and ~~struck~~ text — with “quotes”…

### Installation

* first item
* second item

1986\\. A great year.

```py
print("hello")
```

> Quoted
> text

***

See [the docs][docs] or <http://example.com>.

[docs]: http://example.com/docs
"""


@pytest.fixture
def golden_pairs() -> list[tuple[str, str, str]]:
    """All (name, input, expected) golden fixture triples."""
    return load_fixture_pairs()
