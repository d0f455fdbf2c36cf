"""Embedded storage, seeding and diagnostics."""

from .storage import HanjaStorage, MEMORY_PATH
from .seeding import DataSeeder, SeedReport, load_dataset
from .diagnostics import database_status, diagnose_relations, inspect_word

__all__ = [
    'HanjaStorage',
    'MEMORY_PATH',
    'DataSeeder',
    'SeedReport',
    'load_dataset',
    'database_status',
    'diagnose_relations',
    'inspect_word',
]
