"""Batch ledger for a wine importer: FIFO consumption and LIFO restoration of receipt stock."""
