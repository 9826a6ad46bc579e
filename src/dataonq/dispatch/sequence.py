"""SequenceRunner: execute proxies in order, chaining each response forward.

INVARIANT: The response stored for step N is the exact object assigned to
step N+1's ``previous_response``.
"""

from __future__ import annotations

import time
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import structlog

from dataonq.config.logging import sequence_context

if TYPE_CHECKING:
    from dataonq.core.builder import HandlerRegistry
    from dataonq.core.proxy import MessageProxy
    from dataonq.core.response import HandlerResponse

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SequenceResult:
    """Outcome of one sequence run.

    Attributes:
        responses: One response per executed step, in order.
        completed: Whether every proxy in the sequence was executed.
        sequence_id: Correlation id bound to the run's log lines.
    """

    responses: tuple[HandlerResponse, ...] = field(default_factory=tuple)
    completed: bool = True
    sequence_id: str | None = None

    @property
    def ok(self) -> bool:
        return self.completed and all(r.is_success for r in self.responses)

    @property
    def last(self) -> HandlerResponse | None:
        return self.responses[-1] if self.responses else None


class SequenceRunner:
    """Dispatch proxies one after another through a :class:`HandlerRegistry`.

    Parameters:
        registry: Built handler registry used to pick a handler per proxy.
        stop_on_failure: Stop at the first unsuccessful response.
        timing: Record ``duration_ms`` in each response's ``meta``.
    """

    def __init__(
        self,
        registry: HandlerRegistry,
        *,
        stop_on_failure: bool = True,
        timing: bool = False,
    ) -> None:
        self._registry = registry
        self._stop_on_failure = stop_on_failure
        self._timing = timing

    def run(
        self,
        proxies: Iterable[MessageProxy[Any]],
        *,
        sequence_id: str | None = None,
    ) -> SequenceResult:
        """Execute *proxies* in order.

        The first proxy receives no previous response. Resolution and other
        programming errors propagate; operation failures are recorded.
        """
        pending = list(proxies)
        with sequence_context(sequence_id) as bound_id:
            return self._run(pending, bound_id)

    def _run(self, pending: list[MessageProxy[Any]], sequence_id: str) -> SequenceResult:
        responses: list[HandlerResponse] = []
        previous: HandlerResponse | None = None

        for index, proxy in enumerate(pending):
            if previous is not None:
                proxy.previous_response = previous

            start = time.perf_counter()
            response = self._registry.dispatch(proxy)
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            if self._timing:
                response = _with_duration(response, duration_ms)

            log.debug(
                "sequence.step",
                step=index,
                op=response.op,
                ok=response.is_success,
                duration_ms=duration_ms,
            )
            responses.append(response)
            previous = response

            if not response.is_success and self._stop_on_failure:
                log.info(
                    "sequence.stopped",
                    step=index,
                    op=response.op,
                    remaining=len(pending) - index - 1,
                )
                return SequenceResult(
                    tuple(responses),
                    completed=index == len(pending) - 1,
                    sequence_id=sequence_id,
                )

        return SequenceResult(tuple(responses), completed=True, sequence_id=sequence_id)


def _with_duration(response: HandlerResponse, duration_ms: float) -> HandlerResponse:
    """Copy *response* with timing merged into meta (responses are frozen)."""
    meta = {**(response.meta or {}), "duration_ms": duration_ms}
    return response.model_copy(update={"meta": meta})
