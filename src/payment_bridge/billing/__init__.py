"""Append-only BillingEvent ledger."""
