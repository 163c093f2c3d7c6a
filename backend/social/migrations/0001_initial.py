import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Notification',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('creator', models.JSONField(default=dict)),
                ('creator_id', models.CharField(db_index=True, max_length=64)),
                ('type', models.CharField(choices=[('Like', 'Like'), ('Reply', 'Reply'), ('Follow', 'Follow')], max_length=10)),
                ('title', models.CharField(blank=True, default='', max_length=300)),
                ('user_id', models.CharField(max_length=64)),
                ('post_id', models.CharField(blank=True, max_length=64, null=True)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['user_id', '-created_at'], name='notification_inbox_idx'),
                    models.Index(fields=['creator_id', 'user_id', 'type'], name='notification_match_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Profile',
            fields=[
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, primary_key=True, related_name='profile', serialize=False, to=settings.AUTH_USER_MODEL)),
                ('name', models.CharField(max_length=150)),
                ('email', models.EmailField(max_length=150, unique=True)),
                ('user_name', models.CharField(db_index=True, max_length=180)),
                ('bio', models.TextField(blank=True, default='')),
                ('avatar', models.JSONField(blank=True, null=True)),
                ('followers', models.JSONField(blank=True, default=list)),
                ('following', models.JSONField(blank=True, default=list)),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='Post',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('user', models.JSONField(default=dict)),
                ('title', models.TextField(blank=True, default='')),
                ('image', models.JSONField(blank=True, null=True)),
                ('likes', models.JSONField(blank=True, default=list)),
                ('replies', models.JSONField(blank=True, default=list)),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('owner', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='posts', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at'],
            },
        ),
    ]
