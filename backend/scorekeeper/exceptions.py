from fastapi import HTTPException
from pydantic import BaseModel
from typing import Optional


class ProblemDetail(BaseModel):
    """RFC 7807 compliant error response."""

    type: str = "about:blank"
    title: str
    detail: Optional[str] = None
    status: int
    instance: Optional[str] = None
    code: str


class DomainException(Exception):
    """Base class for domain-specific exceptions."""

    def __init__(
        self,
        status_code: int,
        title: str,
        *,
        code: str,
        detail: str | None = None,
        type_: str = "about:blank",
    ) -> None:
        super().__init__(detail or title)
        self.status_code = status_code
        self.title = title
        self.detail = detail
        self.type = type_
        self.code = code


class MatchNotFound(DomainException):
    def __init__(self, match_id: str) -> None:
        super().__init__(
            status_code=404,
            title="Match not found",
            detail=f"match '{match_id}' not found",
            code="match_not_found",
        )


class CourtNotFound(DomainException):
    def __init__(self, court_number: int) -> None:
        super().__init__(
            status_code=404,
            title="Court not found",
            detail=f"no match on court {court_number}",
            code="court_not_found",
        )


class MatchUpdateFailed(DomainException):
    def __init__(self, match_id: str) -> None:
        super().__init__(
            status_code=503,
            title="Match update failed",
            detail=f"match '{match_id}' could not be saved",
            code="match_update_failed",
        )


class NothingToUndo(DomainException):
    def __init__(self, match_id: str) -> None:
        super().__init__(
            status_code=409,
            title="Nothing to undo",
            detail=f"match '{match_id}' has no earlier snapshot",
            code="nothing_to_undo",
        )


def http_problem(
    status_code: int,
    detail: str,
    code: str,
    *,
    headers: Optional[dict[str, str]] = None,
) -> HTTPException:
    """Create an HTTPException with an attached problem code."""

    exc = HTTPException(status_code=status_code, detail=detail, headers=headers)
    setattr(exc, "code", code)
    return exc
