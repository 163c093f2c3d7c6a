"""
Notification Fan-out
====================

Notifications are a side effect of social actions:

    like     -> emit(Like)      unlike   -> retract(Like)
    follow   -> emit(Follow)    unfollow -> retract(Follow)
    reply    -> emit(Reply)

Two rules hold for every type:
1. Nobody is notified about their own action (creator == recipient).
2. retract() uses the same fields emit() wrote for that type:
   creator id, recipient id, type, and post id when the caller scopes by it.

Callers run these inside the same transaction as the mutation they
describe, so a like and its notification commit or roll back together.
"""

import logging
from typing import Optional

from .models import Notification

logger = logging.getLogger(__name__)


def emit(
    type: str,
    creator: dict,
    recipient_id,
    title: Optional[str] = None,
    post_id=None,
) -> Optional[Notification]:
    creator_id = str(creator.get('_id'))
    recipient_id = str(recipient_id)
    if creator_id == recipient_id:
        return None

    return Notification.objects.create(
        creator=creator,
        creator_id=creator_id,
        type=type,
        title=title or '',
        user_id=recipient_id,
        post_id=str(post_id) if post_id is not None else None,
    )


def retract(type: str, creator: dict, recipient_id, post_id=None) -> int:
    """
    Delete at most one matching notification (the oldest). Returns the
    number deleted.
    """
    creator_id = str(creator.get('_id'))
    recipient_id = str(recipient_id)
    if creator_id == recipient_id:
        return 0

    matches = Notification.objects.filter(
        creator_id=creator_id,
        user_id=recipient_id,
        type=type,
    )
    if post_id is not None:
        matches = matches.filter(post_id=str(post_id))

    match = matches.order_by('created_at', 'id').first()
    if match is None:
        logger.info(f"No {type} notification to retract for {creator_id} -> {recipient_id}")
        return 0
    match.delete()
    return 1


def list_for_user(user_id):
    """A user's inbox, newest first."""
    return Notification.objects.filter(user_id=str(user_id)).order_by('-created_at', '-id')
