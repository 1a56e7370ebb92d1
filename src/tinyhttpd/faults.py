"""
=============================================================================
FAULT INJECTION
=============================================================================

Overrides outgoing responses with a fixed status so clients can be tested
against a misbehaving server.

The response writer asks its injector, once per response, whether the
status should be replaced:

    ResponseWriter.write(sink, response)
        │
        ├──► injector.override(response.status)
        │        │
        │        ├── None          → write the response as-is
        │        └── HTTPStatus    → write a bare response with that status
        │
        └──► sink.send_response(bytes)

=============================================================================
STRATEGIES
=============================================================================

    NoFaults()                         never fires (default)
    EveryNthFault(every=100)           fires on call N, 2N, 3N, ...
    RandomFault(probability=0.001)     fires with probability p per call
    CompositeFault(a, b, ...)          fires if any of its children fire

Injector state lives on the injector instance, not in module globals. The
server is single-threaded, but counters are still guarded by a lock so an
injector can be shared if handling is ever made concurrent.

=============================================================================
"""

import logging
import random
import threading
from abc import ABC, abstractmethod
from typing import Optional

from .http.status_codes import HTTPStatus


logger = logging.getLogger(__name__)


class FaultInjector(ABC):
    """Base class for response fault injection strategies."""

    @abstractmethod
    def override(self, status: HTTPStatus) -> Optional[HTTPStatus]:
        """
        Decide whether to replace the outgoing status.

        Called exactly once per response written.

        Args:
            status: The status the handler intended to send.

        Returns:
            The status to send instead, or None to leave it alone.
        """

    @property
    def name(self) -> str:
        """Get the injector name for logging."""
        return self.__class__.__name__


class NoFaults(FaultInjector):
    """Never overrides anything."""

    def override(self, status: HTTPStatus) -> Optional[HTTPStatus]:
        return None


class EveryNthFault(FaultInjector):
    """
    Deterministically override every Nth response.

    The counter is shared by every response that passes through the
    writer, across all connections, and resets each time it fires:

        every=3:   call  1  2  3  4  5  6  7 ...
                   fires       ✓        ✓
    """

    def __init__(self, every: int = 100, status: HTTPStatus = HTTPStatus.IM_A_TEAPOT):
        if every < 1:
            raise ValueError(f"every must be >= 1, got {every}")
        self.every = every
        self.status = status
        self._count = 0
        self._lock = threading.Lock()

    @property
    def count(self) -> int:
        """Responses seen since the last time this injector fired."""
        return self._count

    def override(self, status: HTTPStatus) -> Optional[HTTPStatus]:
        with self._lock:
            self._count += 1
            if self._count < self.every:
                return None
            self._count = 0
        return self.status

    def reset(self) -> None:
        """Reset the counter."""
        with self._lock:
            self._count = 0


class RandomFault(FaultInjector):
    """
    Override responses with a fixed probability.

    Uses its own random.Random so a seed makes a run reproducible
    without touching the global generator.
    """

    def __init__(
        self,
        probability: float,
        status: HTTPStatus = HTTPStatus.IM_A_TEAPOT,
        seed: Optional[int] = None,
    ):
        if not 0.0 <= probability <= 1.0:
            raise ValueError(f"probability must be within [0, 1], got {probability}")
        self.probability = probability
        self.status = status
        self._random = random.Random(seed)
        self._lock = threading.Lock()

    def override(self, status: HTTPStatus) -> Optional[HTTPStatus]:
        with self._lock:
            draw = self._random.random()
        if draw < self.probability:
            return self.status
        return None


class CompositeFault(FaultInjector):
    """
    Combine several injectors.

    Every child is consulted on every call so that counting injectors
    keep an accurate count. The first child that fires decides the status.
    """

    def __init__(self, *injectors: FaultInjector):
        self.injectors = list(injectors)

    def override(self, status: HTTPStatus) -> Optional[HTTPStatus]:
        chosen = None
        for injector in self.injectors:
            result = injector.override(status)
            if chosen is None and result is not None:
                chosen = result
        return chosen


def build_fault_injector(config) -> FaultInjector:
    """
    Build the injector described by a ServerConfig.

    Uses fault_every, fault_probability, fault_seed and fault_status.
    Returns NoFaults when neither mode is enabled.
    """
    status = HTTPStatus(config.fault_status)
    injectors = []

    if config.fault_every:
        injectors.append(EveryNthFault(every=config.fault_every, status=status))

    if config.fault_probability:
        injectors.append(RandomFault(
            probability=config.fault_probability,
            status=status,
            seed=config.fault_seed,
        ))

    if not injectors:
        return NoFaults()
    if len(injectors) == 1:
        return injectors[0]
    return CompositeFault(*injectors)
