"""
DRF Serializers
===============

Two families:
1. Output serializers render rows in the document shape clients use
   (`_id`, camelCase keys, embedded snapshots).
2. Input serializers validate request bodies. Keys follow the wire
   contract, including its quirks (see AddReplySerializer).
"""

from rest_framework import serializers

from .models import Notification, Post, Profile


class ProfileSerializer(serializers.ModelSerializer):
    """Public user record. The password hash lives on auth.User and never appears here."""
    _id = serializers.CharField(source='key', read_only=True)
    userName = serializers.CharField(source='user_name', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Profile
        fields = [
            '_id',
            'name',
            'userName',
            'email',
            'bio',
            'avatar',
            'followers',
            'following',
            'createdAt',
            'updatedAt',
        ]
        read_only_fields = fields


class PostSerializer(serializers.ModelSerializer):
    """
    A post with its full thread.

    likes and replies are stored in document shape already, so they are
    returned as stored.
    """
    _id = serializers.CharField(source='key', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Post
        fields = [
            '_id',
            'title',
            'image',
            'user',
            'likes',
            'replies',
            'createdAt',
            'updatedAt',
        ]
        read_only_fields = fields


class NotificationSerializer(serializers.ModelSerializer):
    _id = serializers.CharField(source='pk', read_only=True)
    userId = serializers.CharField(source='user_id', read_only=True)
    postId = serializers.CharField(source='post_id', read_only=True, allow_null=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Notification
        fields = [
            '_id',
            'creator',
            'type',
            'title',
            'userId',
            'postId',
            'createdAt',
        ]
        read_only_fields = fields


# ============================================================================
# INPUT
# ============================================================================

class ImageField(serializers.CharField):
    """Base64 data URI or URL. Empty means "no image"."""
    def __init__(self, **kwargs):
        kwargs.setdefault('required', False)
        kwargs.setdefault('allow_blank', True)
        kwargs.setdefault('allow_null', True)
        kwargs.setdefault('trim_whitespace', True)
        super().__init__(**kwargs)


class RegistrationSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150)
    email = serializers.EmailField(max_length=150)
    password = serializers.CharField(min_length=6, trim_whitespace=False)
    avatar = ImageField()

    def validate_name(self, value):
        if not value.strip():
            raise serializers.ValidationError("Name field cannot be empty")
        return value


class LoginSerializer(serializers.Serializer):
    # Presence is checked by accounts.login so both fields report one message
    email = serializers.CharField(required=False, allow_blank=True)
    password = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)


class FollowSerializer(serializers.Serializer):
    followUserId = serializers.CharField()


class UpdateAvatarSerializer(serializers.Serializer):
    avatar = ImageField()


class UpdateProfileSerializer(serializers.Serializer):
    name = serializers.CharField(required=False, max_length=150)
    userName = serializers.CharField(required=False, max_length=180)
    bio = serializers.CharField(required=False, allow_blank=True)


class SeedReplySerializer(serializers.Serializer):
    title = serializers.CharField(required=False, allow_blank=True, default='')
    image = ImageField()
    user = serializers.DictField(required=False)


class CreatePostSerializer(serializers.Serializer):
    title = serializers.CharField(allow_blank=True)
    image = ImageField()
    replies = SeedReplySerializer(many=True, required=False, default=list)


class LikePostSerializer(serializers.Serializer):
    postId = serializers.CharField()


class AddRepliesSerializer(serializers.Serializer):
    postId = serializers.CharField()
    title = serializers.CharField(allow_blank=True)
    image = ImageField()


class AddReplySerializer(serializers.Serializer):
    """
    Wire contract kept from existing clients: `replyId` carries the POST id
    and `postId` carries the depth-1 REPLY id.
    """
    replyId = serializers.CharField()
    postId = serializers.CharField()
    title = serializers.CharField(allow_blank=True)
    image = ImageField()


class ReplyLikeSerializer(serializers.Serializer):
    postId = serializers.CharField()
    replyId = serializers.CharField()
    replyTitle = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class NestedReplyLikeSerializer(ReplyLikeSerializer):
    singleReplyId = serializers.CharField()
