"""Shared fixtures for the nec_projector test suite."""

from __future__ import annotations

import pytest

from nec_projector import NecProjectorController, NecProjectorClient
from nec_projector.emulator import NecProjectorEmulator


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch):
    """Keep the developer's NEC_PROJECTOR_* settings out of the tests."""
    for name in ("NEC_PROJECTOR_HOST", "NEC_PROJECTOR_PORT", "NEC_PROJECTOR_TIMEOUT", "NEC_PROJECTOR_CONFIG"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def controller() -> NecProjectorController:
    return NecProjectorController()


@pytest.fixture
async def emulator():
    """A projector emulator listening on an ephemeral localhost port."""
    async with NecProjectorEmulator(control_id=0x01, model_code=0x0B, port=0, transition_secs=0.2) as emulator:
        yield emulator


@pytest.fixture
async def client(emulator):
    """A client connected to the emulator."""
    client = await NecProjectorClient.create(f"tcp://127.0.0.1:{emulator.port}", timeout_secs=2.0)
    async with client:
        yield client
