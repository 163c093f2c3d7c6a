"""
Django Admin Configuration for Social Models
"""
from django.contrib import admin
from .models import Profile, Post, Notification


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ['user_name', 'name', 'email', 'created_at']
    list_filter = ['created_at']
    search_fields = ['name', 'user_name', 'email']
    readonly_fields = ['followers', 'following', 'created_at', 'updated_at']


@admin.register(Post)
class PostAdmin(admin.ModelAdmin):
    list_display = ['id', 'title', 'owner', 'created_at']
    list_filter = ['created_at']
    search_fields = ['title', 'owner__email']
    readonly_fields = ['user', 'likes', 'replies', 'created_at', 'updated_at']


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ['type', 'creator_id', 'user_id', 'post_id', 'created_at']
    list_filter = ['type', 'created_at']
    search_fields = ['creator_id', 'user_id', 'title']
    readonly_fields = ['creator', 'creator_id', 'type', 'title',
                       'user_id', 'post_id', 'created_at']

    def has_add_permission(self, request):
        # Notifications are only created by social actions
        return False

    def has_change_permission(self, request, obj=None):
        return False
