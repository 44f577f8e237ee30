import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Generic, Optional, TypeVar

from kotoba.config import Config


log = logging.getLogger(__name__)

T = TypeVar("T")


class StateInitError(Exception):
    pass


@dataclass(frozen=True)
class AppState:
    """Shared application state, read-only after construction"""

    name: str
    started_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    @classmethod
    def from_config(cls, config: Config) -> "AppState":
        return cls(name=config.name)


class StateProvider(Generic[T]):
    """Builds a value on first access and returns it on every access

    Concurrent first calls of :py:meth:`get` run ``factory`` exactly once.
    When ``factory`` fails, :py:class:`StateInitError` is raised and the
    next call tries again.
    """

    def __init__(self, factory: Callable[[], T]) -> None:
        self._factory = factory
        self._lock = threading.Lock()
        self._value: Optional[T] = None

    @property
    def initialized(self) -> bool:
        return self._value is not None

    def get(self) -> T:
        value = self._value
        if value is not None:
            return value
        with self._lock:
            if self._value is None:
                try:
                    self._value = self._factory()
                except Exception as e:
                    raise StateInitError(
                        "Failed to initialize application state: {!r}".format(e)
                    ) from e
                log.debug("Application state initialized")
            return self._value
