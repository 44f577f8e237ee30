import time
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from kotoba.config import Config
from kotoba.state import AppState, StateInitError, StateProvider


def test_from_config():
    state = AppState.from_config(Config(name="Test Server"))
    assert state.name == "Test Server"
    assert state.started_at.tzinfo is not None


def test_same_instance():
    provider = StateProvider(lambda: AppState(name="test"))
    assert not provider.initialized
    assert provider.get() is provider.get()
    assert provider.initialized


def test_concurrent_first_access():
    calls = []
    workers = 16
    barrier = threading.Barrier(workers)

    def factory():
        calls.append(1)
        time.sleep(0.05)
        return AppState(name="test")

    provider = StateProvider(factory)

    def get():
        barrier.wait()
        return provider.get()

    with ThreadPoolExecutor(max_workers=workers) as pool:
        states = list(pool.map(lambda _: get(), range(workers)))

    assert len(calls) == 1
    assert all(state is states[0] for state in states)


def test_failed_init_is_retried():
    attempts = []

    def factory():
        attempts.append(1)
        if len(attempts) == 1:
            raise RuntimeError("boom")
        return AppState(name="test")

    provider = StateProvider(factory)
    with pytest.raises(StateInitError, match="boom"):
        provider.get()
    assert not provider.initialized
    assert provider.get().name == "test"
    assert len(attempts) == 2
