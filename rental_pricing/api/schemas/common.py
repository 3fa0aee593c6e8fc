# This file defines the error payload shared by every API endpoint.
# Tests use it to validate that error responses keep a stable shape.

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    error_code: str
    message: str
    details: Any | None = None
    request_id: str
    timestamp: datetime
