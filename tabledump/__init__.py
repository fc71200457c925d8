"""ABOUTME: Export query results from local database files to CSV.
ABOUTME: Exposes the package version."""

__version__ = "0.1.0"
