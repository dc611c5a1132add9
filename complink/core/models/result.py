"""
Operation results returned across the engine boundary.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from complink.core.errors import ComplinkError


class Operation(str, Enum):
    """Engine operations visible to the presentation layer."""
    EXPORT = "export"
    UPDATE = "update"
    RELOAD = "reload"
    RESTORE = "restore"


class ResultStatus(str, Enum):
    OK = "ok"
    FAILED = "failed"
    CANCELLED = "cancelled"


class OperationResult(BaseModel):
    """Success or failure signal for one engine operation."""

    operation: Operation
    status: ResultStatus = ResultStatus.OK
    file_path: str | None = None
    message: str = ""
    error_code: str | None = None
    warnings: list[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status == ResultStatus.OK

    @classmethod
    def success(
        cls,
        operation: Operation,
        file_path: str,
        message: str,
        warnings: list[str] | None = None,
    ) -> "OperationResult":
        return cls(
            operation=operation,
            file_path=file_path,
            message=message,
            warnings=warnings or [],
        )

    @classmethod
    def failure(
        cls,
        operation: Operation,
        error: ComplinkError,
        file_path: str | None = None,
        warnings: list[str] | None = None,
    ) -> "OperationResult":
        return cls(
            operation=operation,
            status=ResultStatus.FAILED,
            file_path=file_path or error.file_path,
            message=error.message,
            error_code=error.code,
            warnings=warnings or [],
        )

    @classmethod
    def cancelled(cls, operation: Operation) -> "OperationResult":
        return cls(
            operation=operation,
            status=ResultStatus.CANCELLED,
            message="Cancelled",
        )
