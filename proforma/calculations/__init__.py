"""
Financial Calculation Engine

Loan payment and pro forma calculations.
"""

from proforma.calculations import amortization, proforma

__all__ = ["amortization", "proforma"]
