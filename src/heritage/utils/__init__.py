"""Utility helpers for the booking client."""
