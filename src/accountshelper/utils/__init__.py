"""Utility helpers for accountshelper."""
