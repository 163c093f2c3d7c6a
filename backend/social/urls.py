"""
Social App URL Configuration

Paths keep the names existing clients call (no trailing slash).
"""
from django.urls import path
from .views import (
    RegistrationView,
    LoginView,
    LogoutView,
    MeView,
    UserListView,
    FollowToggleView,
    UpdateAvatarView,
    UpdateProfileView,
    NotificationListView,
    UserDetailView,
    PostCreateView,
    PostListView,
    LikePostView,
    AddRepliesView,
    AddReplyView,
    LikeReplyView,
    LikeNestedReplyView,
    PostDeleteView,
)

urlpatterns = [
    # Identity & session
    path('registration', RegistrationView.as_view(), name='registration'),
    path('login', LoginView.as_view(), name='login'),
    path('logout', LogoutView.as_view(), name='logout'),
    path('me', MeView.as_view(), name='me'),

    # Users
    path('users', UserListView.as_view(), name='user-list'),
    path('add-user', FollowToggleView.as_view(), name='follow-toggle'),
    path('update-avatar', UpdateAvatarView.as_view(), name='update-avatar'),
    path('update-profile', UpdateProfileView.as_view(), name='update-profile'),
    path('get-notifications/<str:user_id>', NotificationListView.as_view(), name='notification-list'),
    path('get-user/<str:user_id>', UserDetailView.as_view(), name='user-detail'),

    # Posts & replies
    path('create-post', PostCreateView.as_view(), name='post-create'),
    path('posts', PostListView.as_view(), name='post-list'),
    path('add-replies', AddRepliesView.as_view(), name='add-replies'),
    path('add-reply', AddReplyView.as_view(), name='add-reply'),
    path('delete-post/<str:post_id>', PostDeleteView.as_view(), name='post-delete'),

    # Likes
    path('update-likes', LikePostView.as_view(), name='like-post'),
    path('update-replies-react', LikeReplyView.as_view(), name='like-reply'),
    path('update-reply-react', LikeNestedReplyView.as_view(), name='like-nested-reply'),
]
