"""Acceptance-test harness: engines, state snapshots, checks, and step runner."""

from scheduler_provider.acctest.checks import CheckError, compose
from scheduler_provider.acctest.engine import Engine, LocalEngine, Plan
from scheduler_provider.acctest.harness import StepError, TestCase, TestStep, run_test_case
from scheduler_provider.acctest.state import ResourceState, State

__all__ = [
    "CheckError",
    "Engine",
    "LocalEngine",
    "Plan",
    "ResourceState",
    "State",
    "StepError",
    "TestCase",
    "TestStep",
    "compose",
    "run_test_case",
]
