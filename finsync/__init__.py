"""Mini README: Core package initializer for Finsync.

Finsync mirrors a user's income and expense records from a cloud document
store into local state and serves dashboard figures from it. This module only
exposes the logging helper so importing the package stays cheap.
"""

from .logging_utils import get_logger

__all__ = ["get_logger"]
