"""Result envelope returned by ``compile`` and ``resolve`` to the CLI.

The resolver, fetcher and pipeline raise typed :class:`MdxeError`
subclasses. Services catch those at the boundary and hand back a
ServiceResult, so command code only ever branches on ``result.ok``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ServiceError(BaseModel):
    """Why an operation failed: a stable code, a message, and context."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one CLI operation.

    Attributes:
        ok: False when ``error`` is set.
        op: Operation name, ``"compile"`` or ``"resolve"``.
        data: Payload rendered by the formatters (code, URLs, metadata).
        warnings: Non-fatal notes shown alongside a successful payload.
        error: Failure description when ``ok`` is False.
    """

    model_config = ConfigDict(frozen=True)

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None

    @classmethod
    def failure(cls, op: str, code: str, message: str, **detail: Any) -> ServiceResult:
        """Build a failed result; ``None`` detail values are left out."""
        return cls(
            ok=False,
            op=op,
            error=ServiceError(
                code=code,
                message=message,
                detail={k: v for k, v in detail.items() if v is not None},
            ),
        )
