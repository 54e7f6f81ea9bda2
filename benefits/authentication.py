"""
Token authentication used by the API.

Kept in its own module so that REST framework can import it from the
settings without pulling in any view code.
"""
from __future__ import annotations

from rest_framework import authentication


class TokenAuthentication(authentication.TokenAuthentication):
    """DRF token auth with the ``Token`` keyword.

    JWT access tokens issued at login are accepted as well through
    simplejwt's ``Bearer`` authenticator configured in the settings.
    """

    keyword = 'Token'
