"""
Premise Access Store
====================
Django app holding the shared record store tables and the adapter
that translates them to core.primitives.

Import the adapter from core.access_store.adapter; this package
module stays free of model imports so the app registry can load it.
"""
