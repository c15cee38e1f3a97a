"""Record import pipeline.

This module decodes source files, batches normalized records, and
drives bulk submission with a continue-or-abort policy per batch.
"""
