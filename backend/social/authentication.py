"""
Bearer token authentication for DRF.

Header present  -> it must be valid, or the request fails.
Header absent   -> the request continues anonymously; views that need an
                   identity say so (TokenRequired) or fall back to the body.
"""
from rest_framework.authentication import BaseAuthentication
from rest_framework.permissions import BasePermission

from .accounts import decode_token
from .exceptions import Unauthenticated
from .models import Profile

KEYWORD = 'Bearer'


class BearerTokenAuthentication(BaseAuthentication):

    def authenticate(self, request):
        header = request.META.get('HTTP_AUTHORIZATION')
        if not header:
            return None

        if header == f'{KEYWORD} undefined' or not header.startswith(f'{KEYWORD} '):
            raise Unauthenticated()

        token = header.split(' ', 1)[1].strip()
        if not token:
            raise Unauthenticated()

        payload = decode_token(token)

        # A deleted user leaves a valid token with nobody behind it.
        # request.user is then None and request.auth still holds the payload.
        profile = (
            Profile.objects
            .select_related('user')
            .filter(pk=_as_int(payload['id']))
            .first()
        )
        user = profile.user if profile is not None else None
        return (user, payload)

    def authenticate_header(self, request):
        return KEYWORD


class TokenRequired(BasePermission):
    """Only lets through requests that presented a valid bearer token."""

    def has_permission(self, request, view):
        if request.auth is None:
            raise Unauthenticated()
        return True


def _as_int(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
