"""
Shared fixtures: an in-memory store, a role table, a fixed clock and an
event dispatcher that records what it publishes.
"""

import pytest

from timesheets.application.use_cases.base_use_case import WorkflowContext
from timesheets.domain.events.base import EventDispatcher
from tests.fakes import InMemoryStore, FakeCapabilityResolver, FixedClock, RecordingHandler


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def capabilities():
    return FakeCapabilityResolver()


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def recorder():
    return RecordingHandler()


@pytest.fixture
def dispatcher(recorder):
    dispatcher = EventDispatcher()
    dispatcher.register_global_handler(recorder)
    return dispatcher


@pytest.fixture
def context(store, capabilities, clock, dispatcher):
    return WorkflowContext(
        uow_factory=store.unit_of_work,
        capabilities=capabilities,
        clock=clock,
        event_dispatcher=dispatcher,
        system_actor_id="system",
    )
