"""Delivery quote endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, BackgroundTasks, HTTPException, status

from ...config import settings
from ...persistence.audit import log_quote
from ...schemas.quotes import DeliveryQuoteRequest, DeliveryQuoteResponse, PreviewQuoteRequest, PreviewQuoteResponse
from ...services.quotes import build_fallback_quote, get_quote, get_quote_dependencies, preview_quote

router = APIRouter(tags=["quotes"])


@router.post(
    "/delivery-quote",
    response_model=DeliveryQuoteResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
)
def delivery_quote(payload: DeliveryQuoteRequest, background_tasks: BackgroundTasks) -> DeliveryQuoteResponse:
    """Quote delivery for a cart. Engine failures degrade to a flat-rate quote."""
    try:
        quote = get_quote(payload, get_quote_dependencies())
    except Exception as exc:
        logging.exception(f"Error calculating delivery quote for cart {payload.cart_id}: {exc}")
        return build_fallback_quote(payload.cart_id, payload.subtotal_ngn, error=str(exc))

    if settings.audit_enabled:
        background_tasks.add_task(log_quote, quote, payload)
    return quote


@router.post(
    "/admin/preview-quote",
    response_model=PreviewQuoteResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
)
def preview(payload: PreviewQuoteRequest) -> PreviewQuoteResponse:
    """Dry-run a quote with ad-hoc items; never audited."""
    try:
        quote = preview_quote(
            payload.items,
            payload.delivery_coords,
            payload.delivery_type,
            payload.payment_method,
            get_quote_dependencies(),
        )
    except Exception as exc:
        logging.exception(f"Error previewing delivery quote: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        ) from exc
    return PreviewQuoteResponse(quote=quote)
