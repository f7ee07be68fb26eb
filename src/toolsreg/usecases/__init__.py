"""Read-only use-cases over a published snapshot."""

from toolsreg.usecases.list_categories import list_live_categories
from toolsreg.usecases.search_tools import available_capabilities, search_tools
from toolsreg.usecases.verify_snapshot import (
    VerificationResult,
    load_snapshot,
    load_verified_snapshot,
    verify_snapshot,
)

__all__ = [
    "VerificationResult",
    "available_capabilities",
    "list_live_categories",
    "load_snapshot",
    "load_verified_snapshot",
    "search_tools",
    "verify_snapshot",
]
