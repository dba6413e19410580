from __future__ import annotations

from fastapi import HTTPException, Request
from starlette.responses import JSONResponse


class TenantError(HTTPException):
    """A user-facing rejection with a stable machine-readable ``code``.

    Clients branch on ``code``; ``message`` is human-readable and may change.
    """

    def __init__(self, status_code: int, code: str, message: str) -> None:
        super().__init__(status_code=status_code, detail=message)
        self.code = code
        self.message = message

    def payload(self) -> dict[str, object]:
        return {"success": False, "message": self.message, "code": self.code}

    def to_response(self) -> JSONResponse:
        return JSONResponse(status_code=self.status_code, content=self.payload())


async def tenant_error_handler(request: Request, exc: TenantError) -> JSONResponse:
    return exc.to_response()
