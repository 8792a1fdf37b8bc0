"""
Premise Access Store - Native Tables
====================================
Row shapes of the shared record store. Table and column names follow
the store's own naming (users, locations, access_logs, sessions,
pre_registrations); the adapter translates them to core.primitives.
"""

from __future__ import annotations

from django.db import models


class UserType(models.TextChoices):
    STAFF = "Staff", "Staff"
    VISITOR = "Visitor", "Visitor"
    CONTRACTOR = "Contractor", "Contractor"
    VIP = "VIP", "VIP"
    TRANSIENT = "Transient", "Transient"
    DELIVERY = "Delivery", "Delivery"
    HOST = "Host", "Host"


class UserStatus(models.TextChoices):
    ACTIVE = "Active", "Active"
    BLACKLISTED = "Blacklisted", "Blacklisted"


class AccessLogStatus(models.TextChoices):
    GRANTED = "Granted", "Granted"
    CHECKED_OUT = "Checked Out", "Checked Out"
    DENIED = "Denied", "Denied"
    PENDING = "Pending", "Pending"
    REVOKED = "Revoked", "Revoked"


class StoredUser(models.Model):
    user_id = models.AutoField(primary_key=True)
    user_name = models.CharField(max_length=255)
    user_type = models.CharField(
        max_length=20,
        choices=UserType.choices,
        default=UserType.VISITOR,
    )
    user_company = models.CharField(max_length=255, blank=True, default="")
    user_avatar = models.CharField(max_length=500, blank=True, default="")
    user_status = models.CharField(
        max_length=20,
        choices=UserStatus.choices,
        default=UserStatus.ACTIVE,
    )
    blacklist_reason = models.TextField(null=True, blank=True)
    user_phone = models.CharField(max_length=64, blank=True, default="")
    user_email = models.CharField(max_length=255, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "users"
        ordering = ["user_name", "user_id"]

    def __str__(self) -> str:
        return f"{self.user_id} ({self.user_name})"


class StoredLocation(models.Model):
    location_id = models.AutoField(primary_key=True)
    location_name = models.CharField(max_length=255)
    location_zone_code = models.CharField(max_length=32, blank=True, default="")

    class Meta:
        db_table = "locations"
        ordering = ["location_name", "location_id"]

    def __str__(self) -> str:
        return f"{self.location_id} ({self.location_name})"


class StoredAccessLog(models.Model):
    id_logs = models.AutoField(primary_key=True)
    user = models.ForeignKey(
        StoredUser,
        on_delete=models.PROTECT,
        related_name="access_logs",
        db_column="user_id",
    )
    location = models.ForeignKey(
        StoredLocation,
        on_delete=models.PROTECT,
        related_name="access_logs",
        db_column="location_id",
    )
    access_status = models.CharField(
        max_length=20,
        choices=AccessLogStatus.choices,
        default=AccessLogStatus.GRANTED,
    )
    entry_timestamp = models.DateTimeField(db_index=True)
    exit_timestamp = models.DateTimeField(null=True, blank=True)
    purpose = models.CharField(max_length=255, blank=True, default="")
    vehicle_plate = models.CharField(max_length=32, blank=True, default="")

    class Meta:
        db_table = "access_logs"
        ordering = ["-entry_timestamp", "-id_logs"]
        indexes = [
            models.Index(
                fields=["access_status", "entry_timestamp"],
                name="idx_access_status_entry",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.id_logs} ({self.access_status})"


class StoredSession(models.Model):
    session_id = models.AutoField(primary_key=True)
    host = models.ForeignKey(
        StoredUser,
        on_delete=models.PROTECT,
        related_name="hosted_sessions",
        db_column="host_id",
    )
    event_name = models.CharField(max_length=255)
    venue = models.CharField(max_length=255)
    participants = models.TextField(blank=True, default="")
    qr_code = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    session_date = models.CharField(max_length=64)

    class Meta:
        db_table = "sessions"
        ordering = ["-created_at", "-session_id"]

    def __str__(self) -> str:
        return f"{self.session_id} ({self.event_name})"


class StoredPreRegistration(models.Model):
    reg_id = models.AutoField(primary_key=True)
    session = models.ForeignKey(
        StoredSession,
        on_delete=models.CASCADE,
        related_name="pre_registrations",
        db_column="session_id",
    )
    user_name = models.CharField(max_length=255)
    user_email = models.CharField(max_length=255, blank=True, default="")
    user_phone = models.CharField(max_length=64, blank=True, default="")
    registered_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "pre_registrations"
        ordering = ["registered_at", "reg_id"]

    def __str__(self) -> str:
        return f"{self.reg_id} ({self.user_name})"
