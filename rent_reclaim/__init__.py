"""
Rent Reclaim
============
Recovers rent deposits from Solana accounts sponsored by a fee payer.
"""

__version__ = "1.0.0"
