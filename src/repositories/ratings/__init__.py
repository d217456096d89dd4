"""Derived rating-table repositories."""
