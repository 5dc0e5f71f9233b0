"""Nox sessions for dance-floor development tasks."""

from __future__ import annotations

import sys

import nox

PACKAGE = "dance_floor"
SOURCE_DIR = f"src/{PACKAGE}"
CI_ENV = "DANCE_FLOOR_CI"
COVERAGE_FLOOR = "80"

nox.options.error_on_missing_interpreters = False
nox.options.sessions = ["lint", "typecheck", "tests"]


@nox.session
def lint(session: nox.Session) -> None:
    """Run ruff linting and formatting checks."""
    session.install("ruff")
    session.run("ruff", "check", ".")
    session.run("ruff", "format", "--check", ".")


@nox.session(name="lint-fix")
def lint_fix(session: nox.Session) -> None:
    """Apply ruff fixes and formatting."""
    session.install("ruff")
    session.run("ruff", "check", "--fix", ".")
    session.run("ruff", "format", ".")


@nox.session
def tests(session: nox.Session) -> None:
    """Run pytest in CI mode (interactive TUI tests skipped)."""
    session.install("-e", ".[dev]")
    session.run("pytest", "-q", *session.posargs, env={CI_ENV: "1"})


@nox.session
def typecheck(session: nox.Session) -> None:
    """Run mypy over the package."""
    session.install("-e", ".[dev]")
    session.run("mypy", SOURCE_DIR)


@nox.session
def build(session: nox.Session) -> None:
    """Build sdist and wheel artifacts."""
    session.install("build")
    session.run("python", "-m", "build")


@nox.session
def coverage(session: nox.Session) -> None:
    """Run the full suite under coverage, TUI tests included."""
    session.install("-e", ".[dev]")
    session.run("coverage", "run", f"--source={PACKAGE}", "-m", "pytest")
    session.run("coverage", "report", f"--fail-under={COVERAGE_FLOOR}", "-m")


# --------------------------------------------------
#                  LOCAL DEV TESTING
# --------------------------------------------------


@nox.session(name="lint-fix-dev", venv_backend="none")
def lint_fix_dev(session: nox.Session) -> None:
    """Apply ruff fixes and formatting in the active venv."""
    session.run("python", "-m", "ruff", "check", "--fix", ".", external=True)
    session.run("python", "-m", "ruff", "format", ".", external=True)


@nox.session(name="lint-dev", venv_backend="none")
def lint_dev(session: nox.Session) -> None:
    """Fast local lint using active venv."""
    session.run("python", "-m", "ruff", "check", ".", external=True)
    session.run("python", "-m", "ruff", "format", "--check", ".", external=True)


@nox.session(name="tests-dev", venv_backend="none")
def tests_dev(session: nox.Session) -> None:
    """Fast local pytest using active venv."""
    session.run("python", "-m", "pytest", "-q", *session.posargs, external=True)


@nox.session(name="typecheck-dev", venv_backend="none")
def typecheck_dev(session: nox.Session) -> None:
    """Fast local mypy using active venv."""
    session.run("python", "-m", "mypy", SOURCE_DIR, external=True)


@nox.session(name="coverage-dev", venv_backend="none")
def coverage_dev(session: nox.Session) -> None:
    """Fast local coverage using active venv."""
    session.run(
        "python",
        "-m",
        "coverage",
        "run",
        f"--source={PACKAGE}",
        "-m",
        "pytest",
        external=True,
    )
    session.run(
        "python",
        "-m",
        "coverage",
        "report",
        f"--fail-under={COVERAGE_FLOOR}",
        "-m",
        external=True,
    )


@nox.session(name="local-dev", venv_backend="none")
def local_dev(session: nox.Session) -> None:
    """Run the fast local dev checks (lint, typecheck, tests)."""
    session.run(
        sys.executable,
        "-m",
        "nox",
        "-s",
        "lint-fix-dev",
        "lint-dev",
        "typecheck-dev",
        "tests-dev",
        external=True,
    )
