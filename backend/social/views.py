"""
DRF Views
=========

API endpoints, mounted under /api/v1/.

AUTHENTICATION NOTE:
--------------------
Three kinds of routes:
- Public (registration, login, reads by id, post listing, delete):
  no authentication runs at all.
- Token required (logout): a valid bearer token must be present.
- Actor routes (everything that acts on behalf of a user): the actor is the
  bearer-token user when a token is sent; otherwise the `user` object in the
  body identifies the actor, as existing clients do. A token that is sent
  must be valid.

Every success response is {"success": true, ...}.
"""

from rest_framework import status
from rest_framework.views import APIView
from rest_framework.response import Response

from . import accounts, services
from .authentication import TokenRequired
from .exceptions import NotFound, RouteNotFound, ValidationError
from .models import Profile
from .notifications import list_for_user
from .serializers import (
    AddRepliesSerializer,
    AddReplySerializer,
    CreatePostSerializer,
    FollowSerializer,
    LikePostSerializer,
    LoginSerializer,
    NestedReplyLikeSerializer,
    NotificationSerializer,
    PostSerializer,
    ProfileSerializer,
    RegistrationSerializer,
    ReplyLikeSerializer,
    UpdateAvatarSerializer,
    UpdateProfileSerializer,
)


def resolve_actor(request) -> Profile:
    """
    Who is acting: the token user first, then body["user"]["_id"].
    """
    if request.user is not None:
        profile = Profile.objects.filter(pk=request.user.pk).first()
        if profile is None:
            raise NotFound('User not found')
        return profile

    claimed = request.data.get('user') if hasattr(request.data, 'get') else None
    if isinstance(claimed, dict):
        claimed = claimed.get('_id') or claimed.get('id')
    if not claimed:
        raise ValidationError('User is required')
    return accounts.get_profile(claimed)


def validated(serializer_class, request) -> dict:
    serializer = serializer_class(data=request.data)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data


def session_response(profile: Profile, status_code: int) -> Response:
    """Issue a token and deliver it in the body and as a cookie."""
    token = accounts.issue_token(profile)
    response = Response({
        'success': True,
        'user': ProfileSerializer(profile).data,
        'token': token,
    }, status=status_code)
    return accounts.set_token_cookie(response, token)


def route_not_found(request) -> RouteNotFound:
    return RouteNotFound(f"Route {request.get_full_path()} not found")


class BaseAPIView(APIView):
    """
    A path served with a method it does not handle is an unknown route:
    404, checked before authentication and throttling.
    """

    def initial(self, request, *args, **kwargs):
        method = request.method.lower()
        if method not in self.http_method_names or not hasattr(self, method):
            raise route_not_found(request)
        super().initial(request, *args, **kwargs)


class PublicAPIView(BaseAPIView):
    """No authentication: a stale or bogus Authorization header is ignored."""
    authentication_classes = []


# ============================================================================
# IDENTITY & SESSION
# ============================================================================

class RegistrationView(PublicAPIView):
    """
    POST /api/v1/registration

    Body: { "name", "email", "password", "avatar"? }
    """

    def post(self, request):
        data = validated(RegistrationSerializer, request)
        profile = accounts.register(
            name=data['name'],
            email=data['email'],
            password=data['password'],
            avatar=data.get('avatar'),
        )
        return session_response(profile, status.HTTP_201_CREATED)


class LoginView(PublicAPIView):
    """
    POST /api/v1/login

    Body: { "email", "password" }
    """

    def post(self, request):
        data = validated(LoginSerializer, request)
        profile = accounts.login(data.get('email'), data.get('password'))
        return session_response(profile, status.HTTP_200_OK)


class LogoutView(BaseAPIView):
    """GET /api/v1/logout: clears the session cookie."""
    permission_classes = [TokenRequired]

    def get(self, request):
        response = Response({
            'success': True,
            'message': 'Logged out successfully!',
        })
        return accounts.clear_token_cookie(response)


class MeView(BaseAPIView):
    """GET /api/v1/me: the caller's own record, or null without a token."""

    def get(self, request):
        profile = None
        if request.user is not None:
            profile = Profile.objects.filter(pk=request.user.pk).first()
        return Response({
            'success': True,
            'user': ProfileSerializer(profile).data if profile is not None else None,
        })


class UserListView(BaseAPIView):
    """GET /api/v1/users: everyone but the caller, newest first."""

    def get(self, request):
        exclude_id = request.user.pk if request.user is not None else None
        users = accounts.list_users(exclude_id=exclude_id)
        return Response({
            'success': True,
            'users': ProfileSerializer(users, many=True).data,
        })


class UserDetailView(PublicAPIView):
    """GET /api/v1/get-user/<id>"""

    def get(self, request, user_id):
        profile = accounts.get_profile(user_id)
        return Response({
            'success': True,
            'user': ProfileSerializer(profile).data,
        })


class UpdateAvatarView(BaseAPIView):
    """
    PUT /api/v1/update-avatar

    Body: { "user"?, "avatar" }
    """

    def put(self, request):
        actor = resolve_actor(request)
        data = validated(UpdateAvatarSerializer, request)
        profile = accounts.update_avatar(actor, data.get('avatar'))
        return Response({
            'success': True,
            'user': ProfileSerializer(profile).data,
        })


class UpdateProfileView(BaseAPIView):
    """
    PUT /api/v1/update-profile

    Body: { "user"?, "name"?, "userName"?, "bio"? }
    """

    def put(self, request):
        actor = resolve_actor(request)
        data = validated(UpdateProfileSerializer, request)
        profile = accounts.update_profile(
            actor,
            name=data.get('name'),
            user_name=data.get('userName'),
            bio=data.get('bio'),
        )
        return Response({
            'success': True,
            'user': ProfileSerializer(profile).data,
        })


# ============================================================================
# SOCIAL GRAPH & NOTIFICATIONS
# ============================================================================

class FollowToggleView(BaseAPIView):
    """
    PUT /api/v1/add-user

    Body: { "user"?, "followUserId" }
    Follows when not following, unfollows otherwise.
    """

    def put(self, request):
        actor = resolve_actor(request)
        data = validated(FollowSerializer, request)
        result = services.follow_or_unfollow(actor, data['followUserId'])
        return Response({
            'success': True,
            'action': result.action,
            'message': result.message,
        })


class NotificationListView(PublicAPIView):
    """GET /api/v1/get-notifications/<userId>: newest first."""

    def get(self, request, user_id):
        notifications = list_for_user(user_id)
        return Response({
            'success': True,
            'notifications': NotificationSerializer(notifications, many=True).data,
        })


# ============================================================================
# POSTS & REPLIES
# ============================================================================

class PostCreateView(BaseAPIView):
    """
    POST /api/v1/create-post

    Body:
    {
        "user"?,
        "title": "...",
        "image"?: "data:image/...",
        "replies": [{"title", "image"?, "user"?}, ...]
    }
    """

    def post(self, request):
        actor = resolve_actor(request)
        data = validated(CreatePostSerializer, request)
        post = services.create_post(
            actor,
            title=data['title'],
            image=data.get('image'),
            replies=data.get('replies') or [],
        )
        return Response({
            'success': True,
            'post': PostSerializer(post).data,
        }, status=status.HTTP_201_CREATED)


class PostListView(PublicAPIView):
    """GET /api/v1/posts: all posts, newest first."""

    def get(self, request):
        posts = services.list_posts()
        return Response({
            'success': True,
            'posts': PostSerializer(posts, many=True).data,
        })


class PostDeleteView(PublicAPIView):
    """DELETE /api/v1/delete-post/<id>"""

    def delete(self, request, post_id):
        services.delete_post(post_id)
        return Response({'success': True})


class AddRepliesView(BaseAPIView):
    """
    PUT /api/v1/add-replies

    Body: { "user"?, "postId", "title", "image"? }
    Adds a reply directly under the post.
    """

    def put(self, request):
        actor = resolve_actor(request)
        data = validated(AddRepliesSerializer, request)
        post = services.add_replies(actor, data['postId'], data['title'], data.get('image'))
        return Response({
            'success': True,
            'post': PostSerializer(post).data,
        }, status=status.HTTP_201_CREATED)


class AddReplyView(BaseAPIView):
    """
    PUT /api/v1/add-reply

    Body: { "user"?, "replyId": <post id>, "postId": <reply id>, "title", "image"? }
    Adds a reply under a depth-1 reply. Note the swapped key names; the
    service call below uses the real meanings.
    """

    def put(self, request):
        actor = resolve_actor(request)
        data = validated(AddReplySerializer, request)
        post = services.add_reply(
            actor,
            post_id=data['replyId'],
            reply_id=data['postId'],
            title=data['title'],
            image=data.get('image'),
        )
        return Response({
            'success': True,
            'post': PostSerializer(post).data,
        }, status=status.HTTP_201_CREATED)


# ============================================================================
# LIKES
# ============================================================================

def like_response(result) -> Response:
    return Response({
        'success': True,
        'action': result.action,
        'likes': result.likes_count,
        'message': result.message,
    })


class LikePostView(BaseAPIView):
    """
    PUT /api/v1/update-likes

    Body: { "user"?, "postId" }
    """

    def put(self, request):
        actor = resolve_actor(request)
        data = validated(LikePostSerializer, request)
        return like_response(services.toggle_like(actor, data['postId']))


class LikeReplyView(BaseAPIView):
    """
    PUT /api/v1/update-replies-react

    Body: { "user"?, "postId", "replyId", "replyTitle"? }
    """

    def put(self, request):
        actor = resolve_actor(request)
        data = validated(ReplyLikeSerializer, request)
        result = services.toggle_like(
            actor,
            data['postId'],
            path=[data['replyId']],
            reply_title=data.get('replyTitle'),
        )
        return like_response(result)


class LikeNestedReplyView(BaseAPIView):
    """
    PUT /api/v1/update-reply-react

    Body: { "user"?, "postId", "replyId", "singleReplyId", "replyTitle"? }
    """

    def put(self, request):
        actor = resolve_actor(request)
        data = validated(NestedReplyLikeSerializer, request)
        result = services.toggle_like(
            actor,
            data['postId'],
            path=[data['replyId'], data['singleReplyId']],
            reply_title=data.get('replyTitle'),
        )
        return like_response(result)


# ============================================================================
# SERVICE ROUTES
# ============================================================================

class HealthView(PublicAPIView):
    """GET /test: liveness probe."""

    def get(self, request):
        return Response({
            'success': True,
            'message': 'API is working',
        })


class RouteNotFoundView(PublicAPIView):
    """Catch-all for unmatched paths, any method."""

    def handle_unmatched(self, request, *args, **kwargs):
        raise route_not_found(request)

    get = post = put = patch = delete = head = options = trace = handle_unmatched
