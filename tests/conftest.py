"""Shared fixtures: a windowless display, a manual clock and a seeded machine."""

import pytest

from chip8vm import Chip8VM, HeadlessDisplay, MachineConfig
from chip8vm.scheduler import Scheduler
from tests.helpers import FakeClock


@pytest.fixture
def display():
    return HeadlessDisplay()


@pytest.fixture
def vm(display):
    return Chip8VM(display, MachineConfig(seed=1234))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scheduler(vm, clock):
    return Scheduler(vm, clock=clock)
