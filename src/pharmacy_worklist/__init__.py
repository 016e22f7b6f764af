"""Pharmacy dispensing worklist with optimistic updates and push reconciliation."""

__version__ = "0.1.0"
