"""HTTP surface for the budget charts service."""
