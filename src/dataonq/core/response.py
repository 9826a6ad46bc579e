"""HandlerResponse and ResponseError: the outcome of executing one proxy.

INVARIANT: A HandlerResponse never changes after construction.
Failures carry diagnostics in ``error``, never in ``result``.
"""

from __future__ import annotations

import traceback
from typing import Any, Self, cast

from pydantic import (
    BaseModel,
    Field,
    PydanticSchemaGenerationError,
    TypeAdapter,
    ValidationError,
    model_validator,
)

from dataonq.errors import NoResultError, OperationError, TypeMismatchError


class ResponseError(BaseModel):
    """Structured diagnostic attached to a failed HandlerResponse."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_exception(cls, exc: BaseException, *, include_traceback: bool = False) -> Self:
        """Describe *exc*; ``OperationError`` keeps its own code and detail."""
        if isinstance(exc, OperationError):
            code, message, detail = exc.code, exc.message, dict(exc.detail)
        else:
            code, message, detail = type(exc).__name__, str(exc), {}
        if include_traceback:
            detail["traceback"] = "".join(traceback.format_exception(exc))
        return cls(code=code, message=message, detail=detail)


class HandlerResponse(BaseModel):
    """Immutable outcome of one executed operation.

    Attributes:
        is_success: Whether the operation succeeded.
        result: Opaque payload; only read through :meth:`get_result`.
            ``None`` means no payload was stored.
        error: Diagnostic detail when ``is_success`` is False.
        op: Name of the operation that produced this response.
        meta: Optional metadata (timing, attempt counts, etc.).
    """

    model_config = {"frozen": True}

    is_success: bool
    result: Any = None
    error: ResponseError | None = None
    op: str | None = None
    meta: dict[str, Any] | None = None

    @model_validator(mode="after")
    def _failure_has_no_result(self) -> Self:
        if not self.is_success and self.result is not None:
            msg = "A failed response cannot carry a result payload; use 'error'"
            raise ValueError(msg)
        return self

    @classmethod
    def success(
        cls,
        result: Any = None,
        *,
        op: str | None = None,
        meta: dict[str, Any] | None = None,
    ) -> Self:
        return cls(is_success=True, result=result, op=op, meta=meta)

    @classmethod
    def failure(
        cls,
        error: ResponseError | None = None,
        *,
        op: str | None = None,
        meta: dict[str, Any] | None = None,
    ) -> Self:
        return cls(is_success=False, error=error, op=op, meta=meta)

    @property
    def has_result(self) -> bool:
        return self.result is not None

    def get_result[T](self, result_type: type[T]) -> T:
        """Return the stored payload as *result_type*.

        Plain classes are checked with ``isinstance`` and the stored object is
        returned as-is. Parameterised types such as ``list[int]`` are checked
        with a strict pydantic ``TypeAdapter``, as are special forms such as
        ``typing.Any`` that reject ``isinstance``.

        Raises:
            NoResultError: No payload is stored.
            TypeMismatchError: The payload is not compatible with *result_type*.
        """
        if self.result is None:
            op = f" from {self.op!r}" if self.op else ""
            msg = f"Response{op} has no result (is_success={self.is_success})"
            raise NoResultError(msg)

        if isinstance(result_type, type):
            try:
                matches = isinstance(self.result, result_type)
            except TypeError:
                matches = None
            if matches:
                return self.result
            if matches is not None:
                raise TypeMismatchError(result_type, type(self.result))

        try:
            validated = TypeAdapter(result_type).validate_python(self.result, strict=True)
        except (ValidationError, PydanticSchemaGenerationError) as exc:
            raise TypeMismatchError(result_type, type(self.result)) from exc
        return cast("T", validated)
