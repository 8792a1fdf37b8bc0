"""
Premise Access Store - App Configuration
========================================
Relational tables for people, locations, access logs and sessions.
"""

from django.apps import AppConfig


class AccessStoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core.access_store"
    label = "access_store"
    verbose_name = "Premise Access Store"
