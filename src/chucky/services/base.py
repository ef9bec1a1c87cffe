"""Shared call protocol for changeset services.

A service owns one repository or API operation. Expected refusals (a missing
branch, a conflict, a job that never finished) surface as ``ServiceFailure``
so command handlers can turn them into an exit code and a JSON error body.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from .errors import ServiceFailure

R = TypeVar("R")
T = TypeVar("T")


class BaseService(ABC, Generic[R, T]):
    """Callable wrapper around a single ``_run`` implementation."""

    def __call__(self, request: R) -> T:
        try:
            return self._run(request)
        except ServiceFailure as e:
            return self._handle_failure(e)

    @abstractmethod
    def _run(self, request: R) -> T: ...

    def _handle_failure(self, error: ServiceFailure) -> T:
        raise error
