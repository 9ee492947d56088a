"""
Export pipeline components: MongoDB collection -> CSV -> Azure Blob Storage.

Modules:
    base: Abstract base class for data sources
    retry: Fixed-delay bounded retry
    runner: Export orchestrator (validate, connect, fetch, encode, upload, disconnect)
    scheduler: APScheduler integration for self-hosted periodic runs

Subpackages:
    extractors: MongoDB source
    transformers: CSV encoding
    loaders: Azure Blob Storage sink

Architecture:
    A run is one strictly sequential pass:

    1. Validate - Resolve settings into a RunContext before any I/O
    2. Connect  - Open the source connection (retried, fixed delay)
    3. Fetch    - Read the whole collection; empty is an error
    4. Encode   - Render documents as CSV using the first document's keys
    5. Upload   - Require the container, then write one timestamped blob
    6. Cleanup  - Close the source connection on every path

    Nothing is resumed: a failed run is repeated in full by the next trigger.

Usage:
    from exporter.runner import ExportRunner

Example:
    result = await ExportRunner().run()

    print(f"Exported {result.records_exported} documents to {result.blob_name}")

Error Handling:
    Components raise the exceptions from core.exceptions; the runner
    classifies them by kind, logs them and returns a failed result instead
    of raising.
"""

__all__ = [
    "DataSource",
    "RetryPolicy",
    "ExportRunner",
    "ExportScheduler",
    "MongoExtractor",
    "CSVEncoder",
    "BlobLoader",
]
