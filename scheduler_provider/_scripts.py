"""Runnable scripts for common dev tasks. Use: uv run <script-name> (see [project.scripts] in pyproject.toml)."""

import os
import subprocess
import sys

from scheduler_provider.config import ACC_ENV


def _run(args: list[str], env: dict[str, str] | None = None) -> None:
    """Run a command; exit with its code."""
    full_env = os.environ.copy()
    if env:
        full_env.update(env)
    sys.exit(subprocess.run(args, env=full_env).returncode)


def lint() -> None:
    """Run ruff check on scheduler_provider and tests."""
    _run([sys.executable, "-m", "ruff", "check", "scheduler_provider", "tests"])


def lint_fix() -> None:
    """Run ruff check --fix on scheduler_provider and tests."""
    _run([sys.executable, "-m", "ruff", "check", "--fix", "scheduler_provider", "tests"])


def format() -> None:
    """Run ruff format on scheduler_provider and tests."""
    _run([sys.executable, "-m", "ruff", "format", "scheduler_provider", "tests"])


def type_check() -> None:
    """Run pyright on scheduler_provider."""
    _run([sys.executable, "-m", "pyright", "scheduler_provider"])


def test() -> None:
    """Run pytest (acceptance scenarios run in-process against moto)."""
    _run([sys.executable, "-m", "pytest", "tests/", "-v"])


def test_acc() -> None:
    """Run the acceptance scenarios through Pulumi against a real account."""
    _run([sys.executable, "-m", "pytest", "tests/acceptance/", "-v"], env={ACC_ENV: "1"})


def test_cov() -> None:
    """Run pytest with coverage report."""
    _run(
        [
            sys.executable,
            "-m",
            "pytest",
            "tests/",
            "--cov=scheduler_provider",
            "--cov-report=term-missing",
            "-v",
        ]
    )
