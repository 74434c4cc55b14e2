"""Operational scripts for the Q&A API."""
