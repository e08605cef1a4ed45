# Keep in sync with ledger/models.py.

from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


APPEND_ONLY_SQL = """
CREATE OR REPLACE FUNCTION ledger_credit_tx_block_mutation() RETURNS trigger AS $$
BEGIN
    RAISE EXCEPTION 'ledger_credittransaction is append-only (% blocked)', TG_OP;
END;
$$ LANGUAGE plpgsql;

DROP TRIGGER IF EXISTS trg_credit_tx_append_only ON ledger_credittransaction;
CREATE TRIGGER trg_credit_tx_append_only
    BEFORE UPDATE OR DELETE ON ledger_credittransaction
    FOR EACH ROW EXECUTE FUNCTION ledger_credit_tx_block_mutation();
"""

APPEND_ONLY_REVERSE_SQL = """
DROP TRIGGER IF EXISTS trg_credit_tx_append_only ON ledger_credittransaction;
DROP FUNCTION IF EXISTS ledger_credit_tx_block_mutation();
"""


def install_append_only_trigger(apps, schema_editor):
    if schema_editor.connection.vendor != "postgresql":
        return
    schema_editor.execute(APPEND_ONLY_SQL)


def remove_append_only_trigger(apps, schema_editor):
    if schema_editor.connection.vendor != "postgresql":
        return
    schema_editor.execute(APPEND_ONLY_REVERSE_SQL)


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("tenants", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="CreditTransaction",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("org_id", models.CharField(db_index=True, max_length=64)),
                ("unit_id", models.CharField(max_length=64)),
                ("type", models.CharField(choices=[("EARN", "Earn"), ("REDEEM", "Redeem"), ("ADJUST", "Adjust")], max_length=10)),
                ("amount", models.BigIntegerField()),
                ("memo", models.CharField(blank=True, default="", max_length=500)),
                ("sequence", models.PositiveBigIntegerField()),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "tenant",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="credit_transactions",
                        to="tenants.tenant",
                    ),
                ),
            ],
            options={
                "verbose_name": "Credit Transaction",
                "verbose_name_plural": "Credit Transactions",
                "ordering": ("-created_at", "-sequence"),
            },
        ),
        migrations.AddConstraint(
            model_name="credittransaction",
            constraint=models.UniqueConstraint(fields=("tenant", "sequence"), name="uq_credit_tx_tenant_sequence"),
        ),
        migrations.AddConstraint(
            model_name="credittransaction",
            constraint=models.CheckConstraint(condition=~models.Q(amount=0), name="ck_credit_tx_amount_nonzero"),
        ),
        migrations.AddConstraint(
            model_name="credittransaction",
            constraint=models.CheckConstraint(
                condition=~models.Q(type="EARN") | models.Q(amount__gt=0),
                name="ck_credit_tx_earn_positive",
            ),
        ),
        migrations.AddConstraint(
            model_name="credittransaction",
            constraint=models.CheckConstraint(
                condition=~models.Q(type="REDEEM") | models.Q(amount__lt=0),
                name="ck_credit_tx_redeem_negative",
            ),
        ),
        migrations.AddIndex(
            model_name="credittransaction",
            index=models.Index(fields=["org_id", "tenant", "created_at"], name="idx_credit_tx_org_tenant_time"),
        ),
        migrations.RunPython(install_append_only_trigger, remove_append_only_trigger),
    ]
