from typing import cast

import pytest


# CLI options and fixtures for the tests.  They must be in the root tests directory in order for
# "pytest --help" to correctly list them.
def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--write-debug",
        action="store_true",
        help="Write the re-encoded EDID of each file test to testdata/*.debug.edid.",
    )


@pytest.fixture
def write_debug(request: pytest.FixtureRequest) -> bool:
    return cast(bool, request.config.getoption("--write-debug"))
