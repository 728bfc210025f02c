"""
Token authentication for the API.

Kept in its own module so DRF can import the authentication class at
start-up without pulling in any view code.
"""
from __future__ import annotations

from rest_framework import authentication


class TokenAuthentication(authentication.TokenAuthentication):
    """DRF token auth with the ``Token`` keyword.

    Exists to give settings a stable import path.
    """

    keyword = 'Token'
