"""
import_engine - Bulk donation CSV import pipeline.

Public API:
    run_import(file_content, today=None, session=None) → ImportResult
"""

from import_engine.importer import run_import        # noqa: F401
from import_engine.report import ImportResult        # noqa: F401
