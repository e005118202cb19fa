"""Derived profile fields reconciled from several upstream sources."""
