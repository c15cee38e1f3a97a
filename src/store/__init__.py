"""Index submission layer.

This module sends batches to the document index and exposes the SDK
client used by the CLI and run-spec workflows.
"""
