from __future__ import annotations

from fastapi import HTTPException

from carkit.domain.exceptions import ValidationFailedError


def validation_http_error(exc: ValidationFailedError) -> HTTPException:
    return HTTPException(status_code=400, detail={"message": str(exc), "errors": exc.errors})
