# Keep in sync with tenants/models.py.

from django.db import migrations, models

import tenants.models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Tenant",
            fields=[
                ("org_id", models.CharField(db_index=True, max_length=64)),
                ("id", models.CharField(default=tenants.models._new_tenant_id, editable=False, max_length=64, primary_key=True, serialize=False)),
                ("unit_id", models.CharField(db_index=True, max_length=64)),
                ("user_id", models.CharField(max_length=128, unique=True)),
                ("name", models.CharField(max_length=200)),
                ("email", models.EmailField(max_length=254)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Tenant",
                "verbose_name_plural": "Tenants",
                "ordering": ("name",),
            },
        ),
        migrations.AddConstraint(
            model_name="tenant",
            constraint=models.UniqueConstraint(fields=("org_id", "email"), name="uq_tenant_org_email"),
        ),
        migrations.AddIndex(
            model_name="tenant",
            index=models.Index(fields=["org_id", "unit_id"], name="idx_tenant_org_unit"),
        ),
    ]
