"""Seeding, environment checking and terminal colouring helpers.

These are not intended as API functions, and will not remain stable over time.
"""
