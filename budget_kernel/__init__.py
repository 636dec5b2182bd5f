"""
Budget Kernel

An append-only ledger of public-sector budget flow with:
- Funds, Agencies, Programs, Allocations and Disbursements
- Referential and numeric validation before every write
- Atomic, serialized creates
- Summary statistics recomputed from the store on every read
"""

__version__ = "0.1.0"
