"""
Social Actions: Follow, Posts, Replies, Likes
=============================================

Every mutation here follows the same pattern:

    load row(s) -> mutate -> persist -> emit or retract a notification

TRANSACTION STRATEGY:
--------------------
The two halves of each action (both sides of a follow edge; a like and its
notification; a reply and its notification) run in one transaction.atomic()
block, so a failure leaves neither half behind.

The post row is read with select_for_update() before its JSON columns are
rewritten. Replies and their likes live inside that row, so without the
lock two concurrent toggles on the same thread would each write back their
own copy and one would be lost. With the lock they queue on the row.
(SQLite ignores the lock; its transactions open IMMEDIATE, which serializes
writers instead, see settings.DATABASES.)

Image uploads happen BEFORE the transaction opens. A network call must not
hold a row lock, and a failed upload aborts the request before anything is
written.
"""

import logging
from typing import Literal, Optional, Sequence

from django.db import transaction

from .exceptions import NotFound, ReplyNotFound, ValidationError
from .images import POST_FOLDER, discard_image, upload_optional
from .models import Notification, Post, Profile
from .notifications import emit, retract
from .threads import (
    MAX_REPLY_DEPTH,
    build_like,
    build_reply,
    children_of,
    find_like,
    resolve,
)

logger = logging.getLogger(__name__)

POST_LIKE_FALLBACK_TITLE = 'Liked your post'
REPLY_LIKE_FALLBACK_TITLE = 'Liked your Reply'
REPLY_FALLBACK_TITLE = 'Replied to you'
FOLLOW_TITLE = 'Followed you'


class LikeResult:
    """Result of a like toggle."""
    def __init__(self, action: Literal['added', 'removed'], depth: int, likes_count: int):
        self.action = action
        self.depth = depth
        self.likes_count = likes_count

    @property
    def message(self) -> str:
        if self.depth == 0:
            return 'Like Added successfully' if self.action == 'added' else 'Like removed successfully'
        if self.action == 'added':
            return 'Like added to reply successfully'
        return 'Like removed from reply successfully'


class FollowResult:
    """Result of a follow toggle."""
    def __init__(self, action: Literal['followed', 'unfollowed']):
        self.action = action

    @property
    def message(self) -> str:
        return f'User {self.action} successfully'


def _as_pk(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _locked_post(post_id, message: str = 'Post not found') -> Post:
    post = Post.objects.select_for_update().filter(pk=_as_pk(post_id)).first()
    if post is None:
        raise NotFound(message)
    return post


# ============================================================================
# SOCIAL GRAPH
# ============================================================================

def follow_or_unfollow(actor: Profile, target_id) -> FollowResult:
    """
    Toggle the follow edge actor -> target.

    Both sides are written together: actor.following and target.followers
    always agree.
    """
    target_key = str(target_id)
    actor_key = actor.key
    if target_key == actor_key:
        raise ValidationError('You cannot follow yourself')

    target_pk = _as_pk(target_id)
    with transaction.atomic():
        # Lock in pk order so two users following each other cannot deadlock
        rows = {
            profile.pk: profile
            for profile in Profile.objects.select_for_update()
            .filter(pk__in=[actor.pk, target_pk])
            .order_by('pk')
        }
        me = rows.get(actor.pk)
        target = rows.get(target_pk)
        if me is None or target is None:
            raise NotFound('User not found')

        creator = me.snapshot()

        if me.is_following(target_key):
            me.following = [e for e in me.following if str(e.get('userId')) != target_key]
            target.followers = [e for e in target.followers if str(e.get('userId')) != actor_key]
            me.save(update_fields=['following', 'updated_at'])
            target.save(update_fields=['followers', 'updated_at'])
            retract(Notification.Type.FOLLOW, creator, target_key)
            action = 'unfollowed'
        else:
            me.following = me.following + [{'userId': target_key}]
            target.followers = target.followers + [{'userId': actor_key}]
            me.save(update_fields=['following', 'updated_at'])
            target.save(update_fields=['followers', 'updated_at'])
            emit(Notification.Type.FOLLOW, creator, target_key, title=FOLLOW_TITLE)
            action = 'followed'

    logger.info(f"User {actor_key} {action} {target_key}")
    return FollowResult(action)


# ============================================================================
# POSTS & REPLIES
# ============================================================================

def list_posts():
    """All posts, newest first."""
    return Post.objects.order_by('-created_at', '-pk')


def create_post(owner: Profile, title: str, image: Optional[str] = None,
                replies: Sequence[dict] = ()) -> Post:
    """
    Create a post seeded with an initial set of replies.

    Seeded replies are taken as given (title, optional image, optional user
    snapshot); each gets a fresh id and empty likes. All images are uploaded
    before the post is written.
    """
    owner_snapshot = owner.snapshot()
    image_ref = upload_optional(image, POST_FOLDER)

    seeded = []
    for item in replies:
        reply = build_reply(
            user=item.get('user') or owner_snapshot,
            title=item.get('title') or '',
            image=upload_optional(item.get('image'), POST_FOLDER),
        )
        seeded.append(reply)

    post = Post.objects.create(
        owner_id=owner.pk,
        user=owner_snapshot,
        title=title,
        image=image_ref,
        likes=[],
        replies=seeded,
    )
    logger.info(f"User {owner.key} created post {post.key} with {len(seeded)} replies")
    return post


def _append_reply(actor: Profile, post_id, parent_path: Sequence[str], title: str,
                  image: Optional[str]) -> Post:
    """
    Append a reply under the node addressed by parent_path ([] = the post).

    The parent is checked before uploading so a bad address never leaves
    an orphaned image, and checked again under the lock before writing.
    """
    if len(parent_path) >= MAX_REPLY_DEPTH:
        raise ValidationError(f'Replies nest at most {MAX_REPLY_DEPTH} levels deep')

    post = Post.objects.filter(pk=_as_pk(post_id)).first()
    if post is None:
        raise NotFound('Post not found')
    if parent_path and resolve(post.replies, parent_path) is None:
        raise ReplyNotFound()

    image_ref = upload_optional(image, POST_FOLDER)
    creator = actor.snapshot()

    try:
        with transaction.atomic():
            post = _locked_post(post_id)
            if parent_path:
                parent = resolve(post.replies, parent_path)
                if parent is None:
                    raise ReplyNotFound()
                siblings = children_of(parent)
                recipient = str((parent.get('user') or {}).get('_id'))
            else:
                siblings = post.replies
                recipient = post.owner_key

            siblings.append(build_reply(creator, title, image_ref))
            post.save(update_fields=['replies', 'updated_at'])

            emit(
                Notification.Type.REPLY,
                creator,
                recipient,
                title=title or REPLY_FALLBACK_TITLE,
                post_id=post.key,
            )
    except (NotFound, ReplyNotFound):
        # The thread changed between the check and the lock
        if image_ref:
            discard_image(image_ref['public_id'])
        raise

    return post


def add_replies(actor: Profile, post_id, title: str, image: Optional[str] = None) -> Post:
    """Add a depth-1 reply to a post."""
    return _append_reply(actor, post_id, [], title, image)


def add_reply(actor: Profile, post_id, reply_id, title: str, image: Optional[str] = None) -> Post:
    """Add a depth-2 reply under the depth-1 reply `reply_id` of post `post_id`."""
    return _append_reply(actor, post_id, [str(reply_id)], title, image)


def delete_post(post_id) -> None:
    """
    Delete a post and its whole thread.

    Stored images are destroyed by the post_delete signal once the
    deletion commits (see signals.py).
    """
    with transaction.atomic():
        post = _locked_post(post_id, 'Post is not found with this id')
        post.delete()
    logger.info(f"Deleted post {post_id}")


# ============================================================================
# LIKES
# ============================================================================

def toggle_like(actor: Profile, post_id, path: Sequence = (),
                reply_title: Optional[str] = None) -> LikeResult:
    """
    Flip the actor's like on the post (path=[]) or on the reply at `path`.

    NotLiked -> LikedBy(actor): append a like, notify the owner
    LikedBy(actor) -> NotLiked: drop the like, retract that notification

    The owner is the post's author for post likes and the reply's author
    for reply likes. Self-likes never notify. Retraction is scoped by post
    at every level, so unliking one post leaves the others' notifications.
    """
    path = [str(reply_id) for reply_id in path]
    if len(path) > MAX_REPLY_DEPTH:
        raise ValidationError(f'Replies nest at most {MAX_REPLY_DEPTH} levels deep')

    creator = actor.snapshot()
    actor_key = creator['_id']

    with transaction.atomic():
        post = _locked_post(post_id)

        if path:
            target = resolve(post.replies, path)
            if target is None:
                raise NotFound('Reply not found')
            likes = target.get('likes')
            if likes is None:
                likes = target['likes'] = []
            owner_key = str((target.get('user') or {}).get('_id'))
            title = reply_title or REPLY_LIKE_FALLBACK_TITLE
            column = 'replies'
        else:
            likes = post.likes
            owner_key = post.owner_key
            title = post.title or POST_LIKE_FALLBACK_TITLE
            column = 'likes'

        if find_like(likes, actor_key) is not None:
            likes[:] = [like for like in likes if str(like.get('userId')) != actor_key]
            retract(Notification.Type.LIKE, creator, owner_key, post_id=post.key)
            action = 'removed'
        else:
            likes.append(build_like(creator, post_id=None if path else post.key))
            emit(Notification.Type.LIKE, creator, owner_key, title=title, post_id=post.key)
            action = 'added'

        post.save(update_fields=[column, 'updated_at'])

    logger.info(f"Like {action} by {actor_key} on post {post.key} path={path}")
    return LikeResult(action, len(path), len(likes))
