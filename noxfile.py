import glob

import nox

nox.needs_version = ">= 2024.4.15"

LINT_PYTHON_VERSION = "3.12"
BUILD_PYTHON_VERSIONS = ["3.12"]
TEST_PYTHON_VERSIONS = ["3.12"]

RUFF_VERSION = "~=0.6.2"

BUILD_VERSION = "~=1.2"

TESTDATA_EDID_GLOB = "tests/edid/testdata/*.edid"


@nox.session(python=False)
def verify(session: nox.Session) -> None:
    """Run all verification tasks: linting, tests, and the command line round trip."""

    # Meta-session only: nothing is installed here.
    session.notify("lint")
    session.notify("test_python")
    session.notify("test_mypyc")
    session.notify("round_trip")


@nox.session(python=False)
def lint(session: nox.Session) -> None:
    """Run ruff and mypy."""

    # Meta-session only: nothing is installed here.
    session.notify("ruff")
    session.notify("mypy")


@nox.session(python=LINT_PYTHON_VERSION)
def ruff(session: nox.Session) -> None:
    """Run the ruff linter and check formatting."""
    session.install(f"ruff{RUFF_VERSION}")
    session.run("ruff", "check")
    session.run("ruff", "format", "--check")


@nox.session(python=LINT_PYTHON_VERSION)
def mypy(session: nox.Session) -> None:
    """Type check the package, the tests and the build scripts."""
    session.install(".[dev]", env={"MYPYC_ENABLE": "False"})
    session.run("mypy")


def _run_pytest(session: nox.Session, mypyc: bool) -> None:
    session.install(".[dev]", env={"MYPYC_ENABLE": str(mypyc)})
    # Only one coverage report is kept, even when testing several Python versions.
    session.run(
        "pytest", "--cov=edid_tools", "--cov-report=html", "--cov-report=xml", *session.posargs
    )


@nox.session(python=TEST_PYTHON_VERSIONS)
def test_python(session: nox.Session) -> None:
    """Run the tests with coverage against the pure Python codec."""
    _run_pytest(session, mypyc=False)


@nox.session(python=TEST_PYTHON_VERSIONS)
def test_mypyc(session: nox.Session) -> None:
    """Run the tests with coverage against the mypyc-compiled codec."""
    _run_pytest(session, mypyc=True)


@nox.session(python=TEST_PYTHON_VERSIONS)
def round_trip(session: nox.Session) -> None:
    """Check that the installed edid_tool re-encodes every test EDID file byte for byte."""
    session.install(".", env={"MYPYC_ENABLE": "True"})
    session.run("edid_tool", "test_run", *sorted(glob.glob(TESTDATA_EDID_GLOB)))


@nox.session(python=BUILD_PYTHON_VERSIONS)
def build(session: nox.Session) -> None:
    """Build the sdist and the mypyc-compiled wheel."""
    session.install(f"build{BUILD_VERSION}")
    session.run("python", "-m", "build", env={"MYPYC_ENABLE": "True"})


@nox.session(python=LINT_PYTHON_VERSION, default=False)
def format(session: nox.Session) -> None:
    """Sort imports and reformat code using ruff."""
    session.install(f"ruff{RUFF_VERSION}")
    session.run("ruff", "check", "--select", "I", "--fix")
    session.run("ruff", "format")
