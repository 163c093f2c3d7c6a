"""
Identity & Session
==================

Registration, login, session tokens and profile edits.

SESSION MODEL:
--------------
Tokens are stateless HS256 JWTs carrying the user id. They are handed to the
client twice: in the response body (mobile clients send it back as a
Bearer header) and as an HttpOnly cookie.

The cookie lives TOKEN_COOKIE_DAYS (90) while the token itself expires after
JWT_EXPIRES seconds. The token's exp is what authentication checks, so a
long-lived cookie can carry a dead token.

Logout only clears the cookie. There is no server-side blacklist.
"""

import logging
import random
import re
from datetime import timedelta
from typing import Optional

import jwt
from django.conf import settings
from django.contrib.auth.models import User
from django.db import transaction
from django.utils import timezone

from .exceptions import DuplicateEmail, InvalidCredentials, InvalidToken, MissingCredentials, NotFound
from .images import AVATAR_FOLDER, destroy_image, upload_image, upload_optional
from .models import Profile

logger = logging.getLogger(__name__)

WHITESPACE = re.compile(r'\s')


def generate_handle(name: str) -> str:
    """Display name without whitespace plus a random number in [0, 999999]. Not checked for collisions."""
    return WHITESPACE.sub('', name) + str(random.randint(0, 999999))


def register(name: str, email: str, password: str, avatar: Optional[str] = None) -> Profile:
    if Profile.objects.filter(email=email).exists():
        raise DuplicateEmail()

    avatar_ref = upload_optional(avatar, AVATAR_FOLDER)

    with transaction.atomic():
        user = User.objects.create_user(username=email, email=email, password=password)
        profile = Profile.objects.create(
            user=user,
            name=name,
            email=email,
            user_name=generate_handle(name),
            avatar=avatar_ref,
        )

    logger.info(f"Registered user {profile.key} as @{profile.user_name}")
    return profile


def login(email: Optional[str], password: Optional[str]) -> Profile:
    if not email or not password:
        raise MissingCredentials()

    profile = Profile.objects.select_related('user').filter(email=email).first()
    if profile is None or not profile.user.check_password(password):
        raise InvalidCredentials()
    return profile


def issue_token(profile: Profile) -> str:
    now = timezone.now()
    payload = {
        'id': profile.key,
        'iat': now,
        'exp': now + timedelta(seconds=settings.JWT_EXPIRES),
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict:
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except jwt.PyJWTError:
        raise InvalidToken()

    if not isinstance(payload, dict) or 'id' not in payload:
        raise InvalidToken()
    return payload


def set_token_cookie(response, token: str):
    response.set_cookie(
        settings.TOKEN_COOKIE_NAME,
        token,
        max_age=settings.TOKEN_COOKIE_DAYS * 24 * 60 * 60,
        httponly=True,
        samesite='None',
        secure=True,
    )
    return response


def clear_token_cookie(response):
    response.set_cookie(
        settings.TOKEN_COOKIE_NAME,
        '',
        max_age=0,
        expires='Thu, 01 Jan 1970 00:00:00 GMT',
        httponly=True,
        samesite='None',
        secure=True,
    )
    return response


# ============================================================================
# PROFILE QUERIES & EDITS
# ============================================================================

def get_profile(user_id) -> Profile:
    try:
        profile = Profile.objects.filter(pk=int(user_id)).first()
    except (TypeError, ValueError):
        profile = None
    if profile is None:
        raise NotFound('User not found')
    return profile


def list_users(exclude_id=None):
    """Everyone except the caller, newest accounts first."""
    users = Profile.objects.order_by('-created_at', '-pk')
    if exclude_id is not None:
        users = users.exclude(pk=exclude_id)
    return users


def update_avatar(profile: Profile, avatar: Optional[str]) -> Profile:
    """Replace the avatar. The previous image is destroyed first."""
    if not avatar:
        return profile

    previous = (profile.avatar or {}).get('public_id')
    if previous:
        destroy_image(previous)

    profile.avatar = upload_image(avatar, AVATAR_FOLDER, width=150)
    profile.save(update_fields=['avatar', 'updated_at'])
    return profile


def update_profile(profile: Profile, name=None, user_name=None, bio=None) -> Profile:
    changed = []
    if name is not None:
        profile.name = name
        changed.append('name')
    if user_name is not None:
        profile.user_name = user_name
        changed.append('user_name')
    if bio is not None:
        profile.bio = bio
        changed.append('bio')

    if changed:
        profile.save(update_fields=changed + ['updated_at'])
    return profile
