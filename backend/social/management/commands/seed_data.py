"""
Management command to seed the database with sample data.

Usage: python manage.py seed_data

Goes through the service layer, so the seeded data carries the same
follow edges, likes and notifications real traffic would produce.
No images are uploaded.
"""

import random
from django.core.management.base import BaseCommand
from django.contrib.auth.models import User

from social.models import Profile, Post, Notification
from social.accounts import generate_handle
from social.services import add_replies, add_reply, create_post, follow_or_unfollow, toggle_like

SEED_DOMAIN = 'seed.threadline.local'


class Command(BaseCommand):
    help = 'Seed the database with sample data for testing'

    def add_arguments(self, parser):
        parser.add_argument(
            '--users',
            type=int,
            default=10,
            help='Number of users to create'
        )
        parser.add_argument(
            '--posts',
            type=int,
            default=20,
            help='Number of posts to create'
        )
        parser.add_argument(
            '--replies',
            type=int,
            default=60,
            help='Number of replies to create'
        )
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear existing seed data before seeding'
        )

    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing existing data...')
            seeded = Profile.objects.filter(email__endswith=f'@{SEED_DOMAIN}')
            seeded_ids = [str(pk) for pk in seeded.values_list('pk', flat=True)]
            Notification.objects.filter(user_id__in=seeded_ids).delete()
            Post.objects.filter(owner__in=seeded.values('user')).delete()
            User.objects.filter(profile__in=seeded).delete()

        self.stdout.write('Creating users...')
        users = self._create_users(options['users'])

        self.stdout.write('Creating follows...')
        follows = self._create_follows(users)

        self.stdout.write('Creating posts...')
        posts = self._create_posts(users, options['posts'])

        self.stdout.write('Creating replies...')
        replies = self._create_replies(users, posts, options['replies'])

        self.stdout.write('Creating likes...')
        likes = self._create_likes(users, posts)

        self.stdout.write(self.style.SUCCESS(
            f'Successfully created:\n'
            f'  - {len(users)} users\n'
            f'  - {follows} follows\n'
            f'  - {len(posts)} posts\n'
            f'  - {replies} replies\n'
            f'  - {likes} likes and their notifications'
        ))

    def _create_users(self, count):
        users = []
        for i in range(count):
            email = f'user{i+1}@{SEED_DOMAIN}'
            profile = Profile.objects.filter(email=email).first()
            if profile is None:
                name = f'Seed User {i+1}'
                user = User.objects.create_user(username=email, email=email, password='password123')
                profile = Profile.objects.create(
                    user=user,
                    name=name,
                    email=email,
                    user_name=generate_handle(name),
                )
            users.append(profile)
        return users

    def _create_follows(self, users):
        created = 0
        for profile in users:
            others = [u for u in users if u.pk != profile.pk]
            for target in random.sample(others, k=min(3, len(others))):
                profile.refresh_from_db()
                if not profile.is_following(target.key):
                    follow_or_unfollow(profile, target.key)
                    created += 1
        return created

    def _create_posts(self, users, count):
        titles = [
            "Just discovered this amazing trick!",
            "What do you think about...",
            "Help needed with a problem",
            "Check out my latest project",
            "Unpopular opinion:",
            "TIL something interesting",
            "Weekly roundup",
            "Question for the community",
        ]
        posts = []
        for i in range(count):
            post = create_post(
                random.choice(users),
                title=f"{random.choice(titles)} #{i+1}",
            )
            posts.append(post)
        return posts

    def _create_replies(self, users, posts, count):
        texts = [
            "Great point! I totally agree.",
            "Hmm, I'm not sure about this...",
            "Thanks for sharing!",
            "Can you elaborate on this?",
            "Well said!",
            "+1 to this",
        ]
        for _ in range(count):
            post = random.choice(posts)
            post.refresh_from_db()
            # 30% chance of replying to an existing reply
            if post.replies and random.random() < 0.3:
                parent = random.choice(post.replies)
                add_reply(random.choice(users), post.key, parent['_id'], random.choice(texts))
            else:
                add_replies(random.choice(users), post.key, random.choice(texts))
        return count

    def _create_likes(self, users, posts):
        # Net likes left in place; a toggle that removes one undoes an earlier count
        created = 0
        # Like roughly half of the posts, and some of their replies
        for post in posts:
            for liker in random.sample(users, k=len(users) // 2):
                if liker.key == post.owner_key:
                    continue
                result = toggle_like(liker, post.key)
                created += 1 if result.action == 'added' else -1

            post.refresh_from_db()
            for reply in post.replies:
                if random.random() < 0.3:
                    result = toggle_like(random.choice(users), post.key, path=[reply['_id']])
                    created += 1 if result.action == 'added' else -1
        return created
