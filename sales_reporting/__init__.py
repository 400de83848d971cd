"""
Sales Performance Reporting

Read-only sales aggregation reports over a retail order schema.
"""

__version__ = "1.0.0"
