"""
Domain package for the Record Vault.

Exports the record model, the stats summary, and the search/sort descriptors.
Keep this package focused on data definitions and validation concerns.
"""

from vault.domain.models import Record, VaultStats, format_value
from vault.domain.query import RecordQuery, SortField, SortOrder

__all__ = [
    "Record",
    "RecordQuery",
    "SortField",
    "SortOrder",
    "VaultStats",
    "format_value",
]
