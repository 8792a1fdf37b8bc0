import django.db.models.deletion
from django.db import migrations, models


USER_TYPE_CHOICES = [
    ("Staff", "Staff"),
    ("Visitor", "Visitor"),
    ("Contractor", "Contractor"),
    ("VIP", "VIP"),
    ("Transient", "Transient"),
    ("Delivery", "Delivery"),
    ("Host", "Host"),
]

ACCESS_STATUS_CHOICES = [
    ("Granted", "Granted"),
    ("Checked Out", "Checked Out"),
    ("Denied", "Denied"),
    ("Pending", "Pending"),
    ("Revoked", "Revoked"),
]


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="StoredUser",
            fields=[
                ("user_id", models.AutoField(primary_key=True, serialize=False)),
                ("user_name", models.CharField(max_length=255)),
                (
                    "user_type",
                    models.CharField(
                        choices=USER_TYPE_CHOICES,
                        default="Visitor",
                        max_length=20,
                    ),
                ),
                ("user_company", models.CharField(blank=True, default="", max_length=255)),
                ("user_avatar", models.CharField(blank=True, default="", max_length=500)),
                (
                    "user_status",
                    models.CharField(
                        choices=[("Active", "Active"), ("Blacklisted", "Blacklisted")],
                        default="Active",
                        max_length=20,
                    ),
                ),
                ("blacklist_reason", models.TextField(blank=True, null=True)),
                ("user_phone", models.CharField(blank=True, default="", max_length=64)),
                ("user_email", models.CharField(blank=True, default="", max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "db_table": "users",
                "ordering": ["user_name", "user_id"],
            },
        ),
        migrations.CreateModel(
            name="StoredLocation",
            fields=[
                ("location_id", models.AutoField(primary_key=True, serialize=False)),
                ("location_name", models.CharField(max_length=255)),
                (
                    "location_zone_code",
                    models.CharField(blank=True, default="", max_length=32),
                ),
            ],
            options={
                "db_table": "locations",
                "ordering": ["location_name", "location_id"],
            },
        ),
        migrations.CreateModel(
            name="StoredAccessLog",
            fields=[
                ("id_logs", models.AutoField(primary_key=True, serialize=False)),
                (
                    "access_status",
                    models.CharField(
                        choices=ACCESS_STATUS_CHOICES,
                        default="Granted",
                        max_length=20,
                    ),
                ),
                ("entry_timestamp", models.DateTimeField(db_index=True)),
                ("exit_timestamp", models.DateTimeField(blank=True, null=True)),
                ("purpose", models.CharField(blank=True, default="", max_length=255)),
                ("vehicle_plate", models.CharField(blank=True, default="", max_length=32)),
                (
                    "user",
                    models.ForeignKey(
                        db_column="user_id",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="access_logs",
                        to="access_store.storeduser",
                    ),
                ),
                (
                    "location",
                    models.ForeignKey(
                        db_column="location_id",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="access_logs",
                        to="access_store.storedlocation",
                    ),
                ),
            ],
            options={
                "db_table": "access_logs",
                "ordering": ["-entry_timestamp", "-id_logs"],
                "indexes": [
                    models.Index(
                        fields=["access_status", "entry_timestamp"],
                        name="idx_access_status_entry",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="StoredSession",
            fields=[
                ("session_id", models.AutoField(primary_key=True, serialize=False)),
                ("event_name", models.CharField(max_length=255)),
                ("venue", models.CharField(max_length=255)),
                ("participants", models.TextField(blank=True, default="")),
                ("qr_code", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("session_date", models.CharField(max_length=64)),
                (
                    "host",
                    models.ForeignKey(
                        db_column="host_id",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="hosted_sessions",
                        to="access_store.storeduser",
                    ),
                ),
            ],
            options={
                "db_table": "sessions",
                "ordering": ["-created_at", "-session_id"],
            },
        ),
        migrations.CreateModel(
            name="StoredPreRegistration",
            fields=[
                ("reg_id", models.AutoField(primary_key=True, serialize=False)),
                ("user_name", models.CharField(max_length=255)),
                ("user_email", models.CharField(blank=True, default="", max_length=255)),
                ("user_phone", models.CharField(blank=True, default="", max_length=64)),
                ("registered_at", models.DateTimeField(auto_now_add=True)),
                (
                    "session",
                    models.ForeignKey(
                        db_column="session_id",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="pre_registrations",
                        to="access_store.storedsession",
                    ),
                ),
            ],
            options={
                "db_table": "pre_registrations",
                "ordering": ["registered_at", "reg_id"],
            },
        ),
    ]
