"""
Lookup store implementations
"""
from .memory import LookupStore, create_lookup_store

__all__ = [
    "LookupStore",
    "create_lookup_store",
]
