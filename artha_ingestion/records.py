"""
artha_ingestion.records -- Raw data-API rows to typed records.

Responsibility:
    Map the row shape returned by the data service (``total``,
    ``created_at`` ISO strings, nested ``clients.name``) onto InvoiceRecord
    and ProposalRecord, and run a batch of rows under a raise-or-skip
    error policy.

Architecture position:
    Ingestion -- boundary layer.  Imports artha_kernel only.

Failure modes:
    - InvalidInputError (or a subclass) naming the offending field.
    - With ``on_error="skip"`` the error is recorded in a RowError, logged
      as ``ingestion_row_skipped``, and the row is dropped.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from artha_kernel.domain.records import FinancialRecord, InvoiceRecord, ProposalRecord
from artha_kernel.domain.values import TaxType
from artha_kernel.exceptions import InvalidInputError
from artha_kernel.logging_config import get_logger

logger = get_logger("ingestion.records")

R = TypeVar("R", bound=FinancialRecord)

ON_ERROR_POLICIES = ("raise", "skip")


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _pick(row: Mapping[str, Any], *keys: str) -> Any:
    """First non-blank value among ``keys``."""
    for key in keys:
        value = row.get(key)
        if not _blank(value):
            return value
    return None


def _optional_str(value: Any) -> str | None:
    if _blank(value):
        return None
    return str(value).strip()


def _client_name(row: Mapping[str, Any]) -> str | None:
    clients = row.get("clients")
    if isinstance(clients, Mapping):
        name = clients.get("name")
        if not _blank(name):
            return str(name).strip()
    return _optional_str(row.get("client_name"))


def parse_invoice(row: Mapping[str, Any]) -> InvoiceRecord:
    """
    Build an InvoiceRecord from a data-API row.

    ``total`` (or ``amount``) and ``created_at`` are required.  A blank
    ``tax_type`` means no tax and a blank ``pph_amount`` means zero.
    """
    amount = _pick(row, "total", "amount")
    if amount is None:
        raise InvalidInputError("total", None, "invoice total is required")
    return InvoiceRecord(
        record_id=_optional_str(row.get("id")),
        created_at=row.get("created_at"),
        amount=amount,
        status=row.get("status"),
        invoice_number=_optional_str(row.get("invoice_number")),
        due_date=row.get("due_date"),
        issue_date=row.get("issue_date"),
        tax_type=_pick(row, "tax_type") or TaxType.NONE,
        pph_amount=_pick(row, "pph_amount") or 0,
    )


def parse_proposal(row: Mapping[str, Any]) -> ProposalRecord:
    """
    Build a ProposalRecord from a data-API row.

    A missing ``total`` counts as 0; proposals are often saved before
    they are priced.
    """
    return ProposalRecord(
        record_id=_optional_str(row.get("id")),
        created_at=row.get("created_at"),
        amount=_pick(row, "total", "amount") or 0,
        status=row.get("status"),
        title=_optional_str(row.get("title")),
        client_name=_client_name(row),
    )


@dataclass(frozen=True)
class RowError:
    """A row rejected during ingestion (row numbers are 1-based)."""

    row_number: int
    code: str
    field: str | None
    message: str


@dataclass(frozen=True)
class IngestionResult(Generic[R]):
    """Parsed records and the rows that were skipped."""

    records: tuple[R, ...] = ()
    errors: tuple[RowError, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return not self.errors


def parse_records(
    rows: Iterable[Mapping[str, Any]],
    parser: Callable[[Mapping[str, Any]], R],
    on_error: str = "raise",
) -> IngestionResult[R]:
    """
    Parse every row with ``parser``.

    Args:
        rows: Raw row dicts.
        parser: parse_invoice, parse_proposal, or a compatible callable.
        on_error: "raise" re-raises the first InvalidInputError; "skip"
            records it and continues.
    """
    if on_error not in ON_ERROR_POLICIES:
        raise InvalidInputError("on_error", on_error, f"must be one of {ON_ERROR_POLICIES}")

    records: list[R] = []
    errors: list[RowError] = []
    for number, row in enumerate(rows, start=1):
        try:
            records.append(parser(row))
        except InvalidInputError as e:
            if on_error == "raise":
                raise
            errors.append(RowError(
                row_number=number,
                code=e.code,
                field=e.field,
                message=str(e),
            ))
            logger.warning("ingestion_row_skipped", extra={
                "row_number": number,
                "error_code": e.code,
                "field": e.field,
            })

    logger.info("ingestion_completed", extra={
        "parser": getattr(parser, "__name__", repr(parser)),
        "record_count": len(records),
        "skipped_count": len(errors),
    })
    return IngestionResult(records=tuple(records), errors=tuple(errors))
