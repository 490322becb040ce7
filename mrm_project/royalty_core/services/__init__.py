"""
Business logic for the royalty ledger.

calculation and financial_year are pure; cascade, entries, clients and
reports work through the ORM. Import from the submodules directly.
"""
