"""
VATCENTRAL – VAT centralization exercises with automated grading.

A Python package for practising the VAT ("TVA") centralizing journal entry:
learners transfer and reverse VAT accounts from a trial balance, book the
net position on a centralizing account and have the entry graded.
"""

__version__ = "0.3.0"
