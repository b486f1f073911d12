# Initial migration for schedlock Django adapter.

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="LockRecord",
            fields=[
                (
                    "name",
                    models.CharField(
                        help_text="Lock name (unique key of the guarded task)",
                        max_length=64,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "lock_until",
                    models.DateTimeField(
                        db_index=True,
                        help_text="The lock is free once this instant has passed",
                    ),
                ),
                (
                    "locked_at",
                    models.DateTimeField(
                        help_text="When the current or last holder acquired the lock",
                    ),
                ),
                (
                    "locked_by",
                    models.CharField(
                        help_text="Holder identifier, informational only (e.g. hostname)",
                        max_length=255,
                    ),
                ),
            ],
            options={
                "verbose_name": "Lock Record",
                "verbose_name_plural": "Lock Records",
                "db_table": "schedlock",
                "ordering": ["name"],
            },
        ),
    ]
