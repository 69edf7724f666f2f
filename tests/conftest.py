"""Shared fixtures for VM Workflow tests."""

import logging

import pytest

from vm_workflow.core.config import WorkflowConfig
from vm_workflow.core.resources import ResourceKind
from vm_workflow.operations import Operation
from vm_workflow.orchestration import RecordingReporter, WorkflowEngine
from vm_workflow.providers import InMemoryProvider, ResourceSpec


class FakeClock:
    """Monotonic clock the test moves by hand."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


def created_op(name, depends_on=(), compensate=None, log=None):
    """Operation that creates a standalone resource group called `name`."""

    def execute(ctx):
        if log is not None:
            log.append(('execute', name))
        return ctx.provider.create_resource(ResourceSpec(kind=ResourceKind.RESOURCE_GROUP, name=name))

    return Operation(name=name, execute=execute, depends_on=depends_on, compensate=compensate)


def failing_op(name, error=None, depends_on=(), log=None):
    """Operation whose execute raises."""

    def execute(ctx):
        if log is not None:
            log.append(('execute', name))
        raise error or RuntimeError(f"{name} exploded")

    return Operation(name=name, execute=execute, depends_on=depends_on)


@pytest.fixture
def provider():
    """Empty in-memory provider."""
    return InMemoryProvider()


@pytest.fixture
def reporter():
    """Reporter that records every event."""
    return RecordingReporter()


@pytest.fixture
def clock():
    """Hand-driven monotonic clock."""
    return FakeClock()


@pytest.fixture
def config():
    """Non-ephemeral config so successful runs keep their resources."""
    return WorkflowConfig(ephemeral=False)


@pytest.fixture
def engine(provider, reporter, config, clock):
    """Engine wired to the in-memory provider and a recording reporter."""
    return WorkflowEngine(provider, reporter=reporter, config=config, clock=clock)


@pytest.fixture
def logger():
    """Logger with propagation so caplog sees records."""
    log = logging.getLogger('vm_workflow.tests')
    log.setLevel(logging.DEBUG)
    return log
