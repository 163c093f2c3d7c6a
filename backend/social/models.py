"""
Data Models for Threadline
==========================

Design Philosophy:
------------------
1. A Post row is a document. Its likes, its replies and the replies to
   those replies live in JSON columns on the same row.
   - Trade-off: no relational joins into the thread, but one read returns
     the whole thread and one write persists it
   - Reply ids are generated in Python (24 hex chars, ObjectId shaped)

2. User data is split between Django's auth User (credentials, password
   hash) and Profile (everything the API exposes). Profile shares the
   User primary key, so the id in a token, a snapshot and a URL is the same.

3. Snapshots, not references
   - Posts, replies, likes and notifications embed a copy of the user as it
     was at write time. Later profile edits do not rewrite old content.

4. Notification is a standalone row with soft links (string ids) to users
   and posts. It is never owned by either.
"""

import secrets

from django.db import models
from django.contrib.auth.models import User
from django.utils import timezone


def new_object_id() -> str:
    """24 hex characters, the shape clients already expect for document ids."""
    return secrets.token_hex(12)


def iso_now() -> str:
    return timezone.now().isoformat()


class Profile(models.Model):
    """
    Public side of a user account.

    followers / following are lists of {"userId": "<id>"} entries. They are
    maintained in pairs by services.follow_or_unfollow.
    """
    user = models.OneToOneField(
        User,
        on_delete=models.CASCADE,
        primary_key=True,
        related_name='profile'
    )
    name = models.CharField(max_length=150)
    email = models.EmailField(max_length=150, unique=True)
    user_name = models.CharField(max_length=180, db_index=True)
    bio = models.TextField(blank=True, default='')
    avatar = models.JSONField(null=True, blank=True)
    followers = models.JSONField(default=list, blank=True)
    following = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.name} (@{self.user_name})"

    @property
    def key(self) -> str:
        return str(self.pk)

    @property
    def avatar_url(self):
        return (self.avatar or {}).get('url')

    def snapshot(self) -> dict:
        """Copy of the public record, embedded into posts, replies and notifications."""
        return {
            '_id': self.key,
            'name': self.name,
            'userName': self.user_name,
            'email': self.email,
            'bio': self.bio,
            'avatar': self.avatar,
            'followers': list(self.followers),
            'following': list(self.following),
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }

    def is_following(self, user_id) -> bool:
        return any(str(entry.get('userId')) == str(user_id) for entry in self.following)


class Post(models.Model):
    """
    Root of a thread.

    Shape of one entry in `replies` (depth 1):
        {"_id", "user", "title", "image", "likes", "reply", "createdAt"}
    Entries in a reply's `reply` list (depth 2) have the same shape and an
    empty `reply` list.
    """
    owner = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        related_name='posts',
        db_index=True
    )
    user = models.JSONField(default=dict)
    title = models.TextField(blank=True, default='')
    image = models.JSONField(null=True, blank=True)
    likes = models.JSONField(default=list, blank=True)
    replies = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(
        default=timezone.now,
        db_index=True  # feed is newest first
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.title[:50]} by {self.user.get('userName', '?')}"

    @property
    def key(self) -> str:
        return str(self.pk)

    @property
    def owner_key(self) -> str:
        return str(self.user.get('_id', ''))


class Notification(models.Model):
    """
    Derived record created by like / reply / follow actions.

    Matching on undo is done on (creator_id, user_id, type[, post_id]).
    creator_id mirrors creator["_id"] so that filter stays a plain
    indexed column lookup.
    """

    class Type(models.TextChoices):
        LIKE = 'Like', 'Like'
        REPLY = 'Reply', 'Reply'
        FOLLOW = 'Follow', 'Follow'

    creator = models.JSONField(default=dict)
    creator_id = models.CharField(max_length=64, db_index=True)
    type = models.CharField(max_length=10, choices=Type.choices)
    title = models.TextField(blank=True, default='')

    # Recipient: owner of the liked / followed / replied-to entity
    user_id = models.CharField(max_length=64)
    post_id = models.CharField(max_length=64, null=True, blank=True)

    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            # Inbox listing
            models.Index(fields=['user_id', '-created_at'], name='notification_inbox_idx'),
            # Retraction lookup
            models.Index(fields=['creator_id', 'user_id', 'type'], name='notification_match_idx'),
        ]

    def __str__(self):
        return f"{self.type} for {self.user_id} from {self.creator_id}"
