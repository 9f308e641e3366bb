"""
Blood Pressure Ledger - personal blood pressure and pulse records.

Records, edits and reviews readings on a single device with durable local
storage, and imports/exports the full ledger as a portable JSON document.
"""

__version__ = "0.1.0"
