from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from django.conf import settings
from django.db import IntegrityError, transaction
from rest_framework.exceptions import ValidationError

from ledger.exceptions import InsufficientBalance
from ledger.models import MAX_CREDIT_AMOUNT, MAX_CREDIT_BALANCE, CreditTransaction
from orgs.context import get_current_actor
from tenants.services import get_tenant_by_id

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = {
    "createdAt": "created_at",
    "amount": "amount",
    "type": "type",
}
DEFAULT_ORDERING = ("-created_at",)
MAX_LEDGER_PAGE = 1_000_000

AMOUNT_TOO_LARGE_MESSAGE = f"Amount must not exceed {MAX_CREDIT_AMOUNT}"
ADJUST_TOO_LARGE_MESSAGE = f"Amount magnitude must not exceed {MAX_CREDIT_AMOUNT}"
BALANCE_LIMIT_MESSAGE = f"Resulting balance would exceed the limit of {MAX_CREDIT_BALANCE} in magnitude"


@dataclass(frozen=True)
class LedgerPage:
    results: list
    page: int
    limit: int
    total_pages: int
    total_results: int


def _actor_id():
    actor = get_current_actor()
    return actor.id if actor is not None else None


def _read_position(tenant) -> tuple[int, int]:
    return CreditTransaction.all_objects.for_tenant(tenant).position()


def _append(tenant, *, tx_type: str, amount: int, memo: str | None, guard=None) -> CreditTransaction:
    """Append one entry at the tenant's next sequence number.

    `guard(balance)` runs against the balance observed in the same read that
    produced the sequence number. Losing the sequence to a concurrent writer
    means that read is stale, so the whole read/guard/insert cycle is repeated.
    No append may push the balance past `MAX_CREDIT_BALANCE` in either direction.
    """

    max_attempts = max(1, int(getattr(settings, "CREDIT_APPEND_MAX_ATTEMPTS", 5)))

    for attempt in range(1, max_attempts + 1):
        balance, last_sequence = _read_position(tenant)
        if guard is not None:
            guard(balance)
        if abs(balance + amount) > MAX_CREDIT_BALANCE:
            raise ValidationError({"amount": [BALANCE_LIMIT_MESSAGE]})

        sequence = last_sequence + 1
        entry = CreditTransaction(
            org_id=tenant.org_id,
            tenant=tenant,
            unit_id=tenant.unit_id,
            type=tx_type,
            amount=amount,
            memo=memo or "",
            sequence=sequence,
        )
        try:
            with transaction.atomic():
                entry.save(force_insert=True)
            return entry
        except IntegrityError:
            conflict = CreditTransaction.all_objects.filter(
                tenant=tenant, sequence=sequence
            ).exists()
            if not conflict:
                raise
            logger.warning(
                "credit append lost sequence race; retrying",
                extra={
                    "org_id": tenant.org_id,
                    "tenant_id": tenant.pk,
                    "sequence": sequence,
                    "attempt": attempt,
                },
            )

    raise RuntimeError("Failed to append credit transaction (concurrency retries exhausted).")


def _require_positive(amount) -> int:
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise ValidationError({"amount": ["Amount must be positive"]})
    if amount > MAX_CREDIT_AMOUNT:
        raise ValidationError({"amount": [AMOUNT_TOO_LARGE_MESSAGE]})
    return amount


def earn_credit(org_id: str, tenant_id: str, amount: int, memo: str | None = None) -> CreditTransaction:
    amount = _require_positive(amount)
    tenant = get_tenant_by_id(tenant_id, org_id)

    entry = _append(tenant, tx_type=CreditTransaction.TYPE_EARN, amount=amount, memo=memo)
    logger.info(
        "credit earned",
        extra={
            "org_id": org_id,
            "tenant_id": tenant.pk,
            "actor_id": _actor_id(),
            "amount": amount,
            "entry_id": entry.pk,
        },
    )
    return entry


def redeem_credit(org_id: str, tenant_id: str, amount: int, memo: str | None = None) -> CreditTransaction:
    """Redeem `amount` credits; rejected when the derived balance is lower.

    The stored entry carries `-amount`.
    """

    amount = _require_positive(amount)
    tenant = get_tenant_by_id(tenant_id, org_id)

    def guard(balance: int) -> None:
        if balance < amount:
            logger.warning(
                "credit redemption rejected: insufficient balance",
                extra={
                    "org_id": org_id,
                    "tenant_id": tenant.pk,
                    "balance": balance,
                    "requested": amount,
                },
            )
            raise InsufficientBalance(balance, amount)

    entry = _append(
        tenant,
        tx_type=CreditTransaction.TYPE_REDEEM,
        amount=-amount,
        memo=memo,
        guard=guard,
    )
    logger.info(
        "credit redeemed",
        extra={
            "org_id": org_id,
            "tenant_id": tenant.pk,
            "actor_id": _actor_id(),
            "amount": amount,
            "entry_id": entry.pk,
        },
    )
    return entry


def adjust_credit(org_id: str, tenant_id: str, amount: int, memo: str | None = None) -> CreditTransaction:
    """Administrative correction. Any nonzero signed amount; no balance check."""

    if isinstance(amount, bool) or not isinstance(amount, int) or amount == 0:
        raise ValidationError({"amount": ["Amount must be a nonzero integer"]})
    if abs(amount) > MAX_CREDIT_AMOUNT:
        raise ValidationError({"amount": [ADJUST_TOO_LARGE_MESSAGE]})
    tenant = get_tenant_by_id(tenant_id, org_id)

    entry = _append(tenant, tx_type=CreditTransaction.TYPE_ADJUST, amount=amount, memo=memo)
    logger.info(
        "credit adjusted",
        extra={
            "org_id": org_id,
            "tenant_id": tenant.pk,
            "actor_id": _actor_id(),
            "amount": amount,
            "entry_id": entry.pk,
        },
    )
    return entry


def get_tenant_balance(org_id: str, tenant_id: str) -> int:
    tenant = get_tenant_by_id(tenant_id, org_id)
    balance, _ = _read_position(tenant)
    return balance


def parse_sort_by(sort_by: str | None) -> tuple[str, ...]:
    """Translate `"createdAt:desc,amount:asc"` into ORM ordering.

    Unknown fields and malformed parts are ignored; an empty result falls back
    to newest first. `sequence` is appended in the direction of the first key
    so entries sharing a timestamp keep their insertion order.
    """

    ordering: list[str] = []
    seen: set[str] = set()
    for part in (sort_by or "").split(","):
        field, _, direction = part.strip().partition(":")
        column = SORTABLE_FIELDS.get(field.strip())
        if column is None or column in seen:
            continue
        seen.add(column)
        prefix = "-" if direction.strip().lower() == "desc" else ""
        ordering.append(f"{prefix}{column}")

    if not ordering:
        ordering = list(DEFAULT_ORDERING)

    tie_break = "-sequence" if ordering[0].startswith("-") else "sequence"
    return tuple(ordering) + (tie_break,)


def _clamp(value, default: int, *, maximum: int | None = None) -> int:
    try:
        value = int(value)
    except (TypeError, ValueError):
        return default
    if value < 1:
        return default
    if maximum is not None:
        value = min(value, maximum)
    return value


def get_tenant_ledger(
    org_id: str,
    tenant_id: str,
    *,
    sort_by: str | None = None,
    limit: int | None = None,
    page: int | None = None,
) -> LedgerPage:
    tenant = get_tenant_by_id(tenant_id, org_id)

    default_limit = int(getattr(settings, "CREDIT_LEDGER_DEFAULT_LIMIT", 10))
    max_limit = int(getattr(settings, "CREDIT_LEDGER_MAX_LIMIT", 100))
    limit = _clamp(limit, default_limit, maximum=max_limit)
    page = _clamp(page, 1, maximum=MAX_LEDGER_PAGE)

    queryset = CreditTransaction.all_objects.for_tenant(tenant).order_by(*parse_sort_by(sort_by))
    total_results = queryset.count()
    offset = (page - 1) * limit

    return LedgerPage(
        results=list(queryset[offset : offset + limit]),
        page=page,
        limit=limit,
        total_pages=math.ceil(total_results / limit) if total_results else 0,
        total_results=total_results,
    )
