"""Filesystem and process-table scanners."""
