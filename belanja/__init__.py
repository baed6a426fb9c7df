"""
Daftar Belanja - Source Package

A personal shopping log: record purchases, browse them grouped by day
with running totals, filter by date range, and bulk-delete.

DESIGN PRINCIPLES:
1. The store owns the collection - nothing else persists it
2. Fail early, fail visibly on bad input
3. Reads degrade gracefully, writes never pretend to succeed
4. Every mutation is audited
5. Storage backend is swappable
"""

__version__ = "1.0.0"
__author__ = "Daftar Belanja Team"
