from __future__ import annotations

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Max, Sum
from django.db.models.functions import Coalesce
from django.utils import timezone

from ledger.exceptions import ImmutableLedgerError
from orgs.managers import OrgScopedManager, OrgScopedQuerySet
from orgs.models import BaseOrgModel

UPDATE_BLOCKED_MESSAGE = "Credit transactions cannot be updated. Add an ADJUST transaction instead."
DELETE_BLOCKED_MESSAGE = "Credit transactions cannot be deleted. This is an append-only ledger."

# Ceilings on one entry and on a tenant's running balance (either sign).
MAX_CREDIT_AMOUNT = 10**12
MAX_CREDIT_BALANCE = 10**15


class CreditTransactionQuerySet(OrgScopedQuerySet):
    def update(self, **kwargs):
        raise ImmutableLedgerError(UPDATE_BLOCKED_MESSAGE)

    def delete(self):
        raise ImmutableLedgerError(DELETE_BLOCKED_MESSAGE)

    def for_tenant(self, tenant):
        return self.filter(org_id=tenant.org_id, tenant=tenant)

    def position(self) -> tuple[int, int]:
        """Return `(balance, last_sequence)` read in a single statement."""

        totals = self.aggregate(
            balance=Coalesce(Sum("amount"), 0, output_field=models.BigIntegerField()),
            last_sequence=Coalesce(Max("sequence"), 0, output_field=models.BigIntegerField()),
        )
        return int(totals["balance"]), int(totals["last_sequence"])


class CreditTransactionManager(OrgScopedManager.from_queryset(CreditTransactionQuerySet)):
    pass


class CreditTransaction(BaseOrgModel):
    """Append-only (immutable) credit movement for one tenant.

    `sequence` is dense per tenant and unique with it; writers that lose a
    race on the same sequence number get an IntegrityError and must re-read
    the ledger before retrying. The balance is never stored; it is always the
    sum of `amount` over a tenant's entries.
    """

    TYPE_EARN = "EARN"
    TYPE_REDEEM = "REDEEM"
    TYPE_ADJUST = "ADJUST"
    TYPE_CHOICES = [
        (TYPE_EARN, "Earn"),
        (TYPE_REDEEM, "Redeem"),
        (TYPE_ADJUST, "Adjust"),
    ]

    tenant = models.ForeignKey(
        "tenants.Tenant",
        on_delete=models.PROTECT,
        related_name="credit_transactions",
    )
    unit_id = models.CharField(max_length=64)
    type = models.CharField(max_length=10, choices=TYPE_CHOICES)
    amount = models.BigIntegerField()
    memo = models.CharField(max_length=500, blank=True, default="")
    sequence = models.PositiveBigIntegerField()
    created_at = models.DateTimeField(default=timezone.now)

    objects = CreditTransactionManager()
    all_objects = CreditTransactionQuerySet.as_manager()

    class Meta:
        ordering = ("-created_at", "-sequence")
        constraints = [
            models.UniqueConstraint(
                fields=("tenant", "sequence"),
                name="uq_credit_tx_tenant_sequence",
            ),
            models.CheckConstraint(
                condition=~models.Q(amount=0),
                name="ck_credit_tx_amount_nonzero",
            ),
            models.CheckConstraint(
                condition=~models.Q(type="EARN") | models.Q(amount__gt=0),
                name="ck_credit_tx_earn_positive",
            ),
            models.CheckConstraint(
                condition=~models.Q(type="REDEEM") | models.Q(amount__lt=0),
                name="ck_credit_tx_redeem_negative",
            ),
        ]
        indexes = [
            models.Index(
                fields=("org_id", "tenant", "created_at"),
                name="idx_credit_tx_org_tenant_time",
            ),
        ]
        verbose_name = "Credit Transaction"
        verbose_name_plural = "Credit Transactions"

    def __str__(self) -> str:  # pragma: no cover - admin/debug helper
        return f"{self.created_at:%Y-%m-%d %H:%M:%S} [{self.tenant_id}#{self.sequence}] {self.type} {self.amount}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ImmutableLedgerError(UPDATE_BLOCKED_MESSAGE)

        tenant = self.tenant
        if not self.org_id:
            self.org_id = tenant.org_id
        if self.org_id != tenant.org_id:
            raise ValidationError(
                "Cross-org ledger write blocked: entry org does not match tenant org."
            )
        if not self.unit_id:
            self.unit_id = tenant.unit_id

        kwargs["force_insert"] = True
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ImmutableLedgerError(DELETE_BLOCKED_MESSAGE)
