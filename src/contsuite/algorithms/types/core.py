"""Abstract base classes for the contsuite pipelines.

This module provides the building blocks shared by every algorithm package:
configuration payloads, backend calls, interfaces, engines and backends.
A solve always follows the same flow: entry point -> engine -> interface ->
backend.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, fields, replace
from typing import Any, Generic, TypeVar, Union

from contsuite.algorithms.types.exceptions import ContsuiteError, EngineError

DomainT = TypeVar("DomainT")

ConfigT = TypeVar("ConfigT", bound=Union["_ContsuiteBaseConfig", None])

ProblemT = TypeVar("ProblemT")

ResultT = TypeVar("ResultT")

OutputsT = TypeVar("OutputsT")


@dataclass(frozen=True)
class _BackendCall:
    """Describe a backend call with positional and keyword arguments."""

    args: tuple[Any, ...] = ()
    kwargs: dict[str, Any] = field(default_factory=dict)


class _ContsuiteBaseConfig(ABC):
    """Base class for frozen configuration dataclasses.

    Subclasses are expected to be ``@dataclass(frozen=True)``. Validation runs
    once, right after construction, through :meth:`_validate`.
    """

    __slots__ = ()

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Validate the configuration. Raise ``ValueError`` on bad values."""
        return None

    def merge(self, **overrides) -> "_ContsuiteBaseConfig":
        """Return a copy of the configuration with *overrides* applied.

        ``None`` values are ignored so call sites can forward optional keyword
        arguments untouched.

        Raises
        ------
        ValueError
            If an override does not name a field of the configuration.
        """
        filtered = {k: v for k, v in overrides.items() if v is not None}
        if not filtered:
            return self
        known = {f.name for f in fields(self)}
        unknown = sorted(set(filtered) - known)
        if unknown:
            raise ValueError(f"Unknown configuration parameter(s): {', '.join(unknown)}")
        return replace(self, **filtered)


class _ContsuiteBaseBackend(Generic[OutputsT]):
    """Abstract base class for all backend implementations.

    Backends are responsible for the core numerical computations, while
    engines handle orchestration and interfaces manage data translation.

    Notes
    -----
    This base class provides common lifecycle hooks that backends can override:
    - on_iteration: Called after each iteration of the main algorithm
    - on_accept: Called when the backend detects convergence/success
    - on_failure: Called when the backend completes without converging
    - on_success: Called by the engine after final acceptance

    Hooks must not alter control flow; they exist for logging and tests.
    """

    @abstractmethod
    def run(self, *args, **kwargs) -> OutputsT:
        """Run the backend."""
        ...

    def on_iteration(self, k: int, x: Any, r_norm: float) -> None:
        """Called after each iteration of the main algorithm.

        Parameters
        ----------
        k : int
            Current iteration number (0-based).
        x : Any
            Current solution estimate or state.
        r_norm : float
            Current residual norm or convergence metric.
        """
        return

    def on_accept(self, x: Any, *, iterations: int, residual_norm: float) -> None:
        """Called when the backend detects convergence or successful completion."""
        return

    def on_failure(self, x: Any, *, iterations: int, residual_norm: float) -> None:
        """Called when the backend completes without converging."""
        return

    def on_success(self, x: Any, *, iterations: int, residual_norm: float) -> None:
        """Called by the engine after final acceptance."""
        return


class _ContsuiteBaseInterface(Generic[ConfigT, ProblemT, ResultT, OutputsT], ABC):
    """Shared contract for translating between domain objects and backends."""

    @abstractmethod
    def create_problem(self, *, domain_obj: Any, config: ConfigT, **kwargs) -> ProblemT:
        """Compose an immutable problem payload for the backend."""

    @abstractmethod
    def to_backend_inputs(self, problem: ProblemT) -> _BackendCall:
        """Translate a problem into backend invocation arguments."""

    @abstractmethod
    def to_results(self, outputs: OutputsT, *, problem: ProblemT) -> ResultT:
        """Package backend outputs into user-facing result objects."""

    def on_start(self, problem: ProblemT) -> None:
        return None

    def on_success(self, outputs: OutputsT, *, problem: ProblemT) -> None:
        return None

    def on_failure(self, exc: Exception, *, problem: ProblemT) -> None:
        return None


class _ContsuiteBaseEngine(Generic[ProblemT, ResultT, OutputsT], ABC):
    """Template providing the canonical engine flow."""

    def __init__(
        self,
        *,
        backend: _ContsuiteBaseBackend[OutputsT],
        interface: _ContsuiteBaseInterface[Any, ProblemT, ResultT, OutputsT] | None = None,
    ) -> None:
        self._backend = backend
        self._interface = interface

    @property
    def backend(self) -> _ContsuiteBaseBackend[OutputsT]:
        return self._backend

    @property
    def interface(self) -> _ContsuiteBaseInterface[Any, ProblemT, ResultT, OutputsT]:
        if self._interface is None:
            raise EngineError(
                f"{self.__class__.__name__} must be configured with an interface before solving."
            )
        return self._interface

    def with_interface(
        self,
        interface: _ContsuiteBaseInterface[Any, ProblemT, ResultT, OutputsT],
    ) -> "_ContsuiteBaseEngine[ProblemT, ResultT, OutputsT]":
        self._interface = interface
        return self

    def solve(self, problem: ProblemT) -> ResultT:
        """Execute the standard engine orchestration for ``problem``."""

        interface = self.interface
        call = interface.to_backend_inputs(problem)
        interface.on_start(problem)

        try:
            outputs = self._invoke_backend(call)
        except Exception as exc:
            interface.on_failure(exc, problem=problem)
            self._handle_backend_failure(exc, problem=problem, call=call)
            raise

        interface.on_success(outputs, problem=problem)
        self._after_backend_success(outputs, problem=problem)
        return interface.to_results(outputs, problem=problem)

    def _after_backend_success(self, outputs: OutputsT, *, problem: ProblemT) -> None:
        return None

    def _handle_backend_failure(self, exc: Exception, *, problem: ProblemT, call: _BackendCall) -> None:
        """Translate a backend failure.

        Library errors already carry a precise meaning and propagate as they
        are; anything else is wrapped into an :class:`EngineError`.
        """
        if isinstance(exc, ContsuiteError):
            raise exc
        raise EngineError(f"{self.__class__.__name__} failed: {exc}") from exc

    def _invoke_backend(self, call: _BackendCall) -> OutputsT:
        return self._backend.run(*call.args, **call.kwargs)
