from __future__ import annotations

from typing import NamedTuple, Optional

from .access import normalize_role


class Identity(NamedTuple):
    """Who is acting now.  Passed explicitly into resolver and service calls."""
    user_id: Optional[int]
    role: Optional[str]

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


ANONYMOUS = Identity(None, None)


def identity_for_user(user) -> Identity:
    if not (user and getattr(user, 'is_authenticated', False)):
        return ANONYMOUS
    return Identity(user.pk, normalize_role(getattr(user, 'role', None)))


def identity_from_request(request) -> Identity:
    return identity_for_user(getattr(request, 'user', None))
