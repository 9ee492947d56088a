"""
Pydantic schemas for export runs.

Schemas:
    export: Run context, export target naming and run results

Usage:
    from schemas.export import RunContext, ExportTarget, ExportRunResult

Example:
    target = ExportTarget(container_name="exports", timestamp=started_at)
    target.blob_name  # "data-export-2024-01-15T10:00:00.000Z.csv"
"""

__all__ = [
    "RunState",
    "RunStatus",
    "RunContext",
    "ExportTarget",
    "ExportRunResult",
]
