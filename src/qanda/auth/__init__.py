"""
Module: auth
Description: Package initialization for authorization.

This package contains the moderation gate:
- secret: Event secret generation, comparison and the authorize() check

Voting and asking are unauthenticated; only moderation needs the secret.
"""

__all__ = []
