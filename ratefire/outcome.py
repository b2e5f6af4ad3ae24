from __future__ import annotations

from dataclasses import dataclass

import httpx


@dataclass(frozen=True)
class Outcome:
    """Result of one dispatched request.

    A success carries the response status (any code, 5xx included);
    a failure carries the transport error that prevented a response.
    """

    status_code: int | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def label(self) -> str:
        return str(self.status_code) if self.ok else "ERR"

    @classmethod
    def success(cls, response: httpx.Response) -> Outcome:
        return cls(status_code=response.status_code)

    @classmethod
    def failure(cls, exc: Exception) -> Outcome:
        # Some httpx errors (timeouts in particular) have an empty message.
        return cls(error=str(exc) or exc.__class__.__name__)
