"""Utility modules for macsign."""
