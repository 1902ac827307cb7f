"""Mini README: Interactive interfaces for Finsync.

Exports the FastAPI application factory and the transaction list view that
backs it. Further interfaces (e.g. a terminal dashboard) should live here.
"""

from .list_view import EditDraft, NoActiveDraftError, TransactionListView
from .web_app import create_application

__all__ = ["EditDraft", "NoActiveDraftError", "TransactionListView", "create_application"]
