"""
claimfill: populates [placeholder] fields in claim documents from stored
claimant, holder and legal-heir field values.
"""

__version__ = "0.1.0"
