"""Quote audit log endpoints."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from fastapi import APIRouter, HTTPException, Query, status

from ...persistence.audit import list_quotes

router = APIRouter(prefix="/audit", tags=["audit"])


@router.get("/quotes", status_code=status.HTTP_200_OK)
def get_quote_audit_log(
    from_date: datetime | None = Query(default=None, alias="from", description="Only quotes created at or after"),
    to_date: datetime | None = Query(default=None, alias="to", description="Only quotes created at or before"),
    limit: int = Query(default=100, ge=1, le=1000, description="Maximum number of quotes to return"),
    offset: int = Query(default=0, ge=0, description="Number of quotes to skip"),
) -> dict[str, Any]:
    """Served quotes, newest first."""
    try:
        quotes, total = list_quotes(from_date=from_date, to_date=to_date, limit=limit, offset=offset)
        return {"success": True, "quotes": quotes, "total": total}
    except Exception as exc:
        logging.exception(f"Error fetching quote audit log: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to fetch quote audit log: {str(exc)}"
        ) from exc
