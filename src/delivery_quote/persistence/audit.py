"""Quote audit log: Supabase when configured, JSON files otherwise."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from ..db.supabase import get_supabase_client
from ..schemas.quotes import DeliveryQuoteRequest, DeliveryQuoteResponse
from .filesystem import FileStorage

AUDIT_TABLE = "delivery_quote_audit"


def build_audit_entry(quote: DeliveryQuoteResponse, request: DeliveryQuoteRequest) -> dict[str, Any]:
    primary = quote.delivery_options[0] if quote.delivery_options else None
    return {
        "cart_id": quote.cart_id,
        "request": request.model_dump_json(),
        "response": quote.model_dump_json(exclude_none=True),
        "grand_total_ngn": quote.grand_total_ngn,
        "distance_km": quote.distance_km,
        "effective_weight_kg": quote.effective_weight_kg,
        "delivery_type": request.delivery_type.value,
        "applied_rules": list(primary.applied_rules) if primary else [],
        "created_at": datetime.now(timezone.utc).isoformat(),
    }


def log_quote(quote: DeliveryQuoteResponse, request: DeliveryQuoteRequest) -> None:
    """Persist a served quote. Failures are logged and never reach the caller."""

    entry = build_audit_entry(quote, request)
    supabase = get_supabase_client()
    if supabase:
        try:
            supabase.table(AUDIT_TABLE).insert(entry).execute()
            return
        except Exception as e:
            logging.warning(f"Failed to write quote audit to database, writing to file: {e}")

    try:
        storage = FileStorage()
        payload = {
            **entry,
            "request": json.loads(entry["request"]),
            "response": json.loads(entry["response"]),
        }
        storage.write_json(storage.audit_path(quote.cart_id), payload)
    except OSError as e:
        logging.error(f"Failed to write quote audit for cart {quote.cart_id}: {e}")


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _decoded(row: dict[str, Any]) -> dict[str, Any]:
    # database rows keep request/response as JSON strings; files store them parsed
    decoded = dict(row)
    for key in ("request", "response"):
        if isinstance(decoded.get(key), str):
            try:
                decoded[key] = json.loads(decoded[key])
            except json.JSONDecodeError:
                pass
    return decoded


def _list_quotes_from_database(
    supabase: Any,
    from_date: Optional[datetime],
    to_date: Optional[datetime],
    limit: int,
    offset: int,
) -> tuple[list[dict[str, Any]], int]:
    query = supabase.table(AUDIT_TABLE).select("*", count="exact")
    if from_date:
        query = query.gte("created_at", _as_utc(from_date).isoformat())
    if to_date:
        query = query.lte("created_at", _as_utc(to_date).isoformat())
    response = query.order("created_at", desc=True).range(offset, offset + limit - 1).execute()
    rows = response.data or []
    total = response.count if response.count is not None else len(rows)
    return [_decoded(row) for row in rows], total


def _list_quotes_from_files(
    from_date: Optional[datetime],
    to_date: Optional[datetime],
    limit: int,
    offset: int,
) -> tuple[list[dict[str, Any]], int]:
    storage = FileStorage()
    entries: list[tuple[datetime, dict[str, Any]]] = []
    for path in storage.audit_root.glob("*.json"):
        try:
            entry = storage.read_json(path)
            created_at = _as_utc(datetime.fromisoformat(entry["created_at"]))
        except (OSError, ValueError, KeyError, TypeError) as e:
            logging.warning(f"Skipping unreadable audit file {path.name}: {e}")
            continue
        if from_date and created_at < _as_utc(from_date):
            continue
        if to_date and created_at > _as_utc(to_date):
            continue
        entries.append((created_at, entry))

    entries.sort(key=lambda pair: pair[0], reverse=True)
    return [entry for _, entry in entries[offset : offset + limit]], len(entries)


def list_quotes(
    from_date: Optional[datetime] = None,
    to_date: Optional[datetime] = None,
    limit: int = 100,
    offset: int = 0,
) -> tuple[list[dict[str, Any]], int]:
    """Return ``(quotes, total)``, newest first.

    ``total`` counts every entry inside the date window, not just the page.
    Naive datetimes are taken as UTC.
    """

    supabase = get_supabase_client()
    if supabase:
        try:
            return _list_quotes_from_database(supabase, from_date, to_date, limit, offset)
        except Exception as e:
            logging.warning(f"Failed to read quote audit from database, reading files: {e}")

    return _list_quotes_from_files(from_date, to_date, limit, offset)
