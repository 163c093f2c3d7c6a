"""
Tests for Threadline services

Focus areas:
1. Identity: registration, login, tokens
2. Follow graph symmetry and its notifications
3. Like toggling at all three levels (post, reply, nested reply)
4. Reply tree addressing and insertion
5. Storage cleanup on post deletion
6. Concurrent writers on one post row
"""

import os
import re
import subprocess
import sys
import threading
from datetime import timedelta
from functools import partial
from io import StringIO
from pathlib import Path
from unittest.mock import patch

import jwt
from cloudinary.exceptions import Error as CloudinaryError
from django.conf import settings
from django.core.management import call_command
from django.db import connection
from django.test import SimpleTestCase, TestCase, TransactionTestCase, skipUnlessDBFeature
from django.test.utils import CaptureQueriesContext
from django.utils import timezone

from .accounts import decode_token, generate_handle, issue_token, login, register
from .exceptions import (
    DuplicateEmail,
    InvalidCredentials,
    InvalidToken,
    MissingCredentials,
    NotFound,
    ReplyNotFound,
    ValidationError,
)
from .models import Notification, Post
from .services import (
    add_replies,
    add_reply,
    create_post,
    delete_post,
    follow_or_unfollow,
    toggle_like,
)
from .threads import MAX_REPLY_DEPTH, build_reply, image_ids, resolve, walk

BACKEND_DIR = Path(__file__).resolve().parent.parent


def upload_result(public_id):
    return {'public_id': public_id, 'secure_url': f'https://res.cloudinary.com/demo/{public_id}.png'}


class RegistrationTestCase(TestCase):

    def test_handle_is_name_without_spaces_plus_number(self):
        profile = register('Jane  Q Doe', 'jane@test.com', 'secret1')

        match = re.fullmatch(r'JaneQDoe(\d+)', profile.user_name)
        self.assertIsNotNone(match)
        self.assertLessEqual(int(match.group(1)), 999999)

    def test_generate_handle_range(self):
        with patch('social.accounts.random.randint', return_value=999999):
            self.assertEqual(generate_handle('Ann Lee'), 'AnnLee999999')
        with patch('social.accounts.random.randint', return_value=0):
            self.assertEqual(generate_handle('Ann\tLee'), 'AnnLee0')

    def test_duplicate_email_rejected(self):
        register('First', 'dup@test.com', 'secret1')

        with self.assertRaises(DuplicateEmail):
            register('Second', 'dup@test.com', 'secret2')

    def test_password_is_hashed(self):
        profile = register('Hash', 'hash@test.com', 'secret1')

        self.assertNotEqual(profile.user.password, 'secret1')
        self.assertTrue(profile.user.check_password('secret1'))

    def test_avatar_uploaded_when_given(self):
        with patch('cloudinary.uploader.upload', return_value=upload_result('avatars/a1')) as upload:
            profile = register('Pic', 'pic@test.com', 'secret1', avatar='data:image/png;base64,AAAA')

        upload.assert_called_once_with('data:image/png;base64,AAAA', folder='avatars')
        self.assertEqual(profile.avatar['public_id'], 'avatars/a1')
        self.assertTrue(profile.avatar['url'].startswith('https://'))

    def test_no_avatar_means_no_upload(self):
        with patch('cloudinary.uploader.upload') as upload:
            profile = register('Plain', 'plain@test.com', 'secret1')

        upload.assert_not_called()
        self.assertIsNone(profile.avatar)


class LoginTestCase(TestCase):

    def setUp(self):
        self.profile = register('Login User', 'login@test.com', 'secret1')

    def test_login_success(self):
        self.assertEqual(login('login@test.com', 'secret1').pk, self.profile.pk)

    def test_wrong_password_and_unknown_email_look_the_same(self):
        with self.assertRaises(InvalidCredentials) as wrong_password:
            login('login@test.com', 'nope-nope')
        with self.assertRaises(InvalidCredentials) as unknown_email:
            login('nobody@test.com', 'secret1')

        self.assertEqual(str(wrong_password.exception.detail), str(unknown_email.exception.detail))

    def test_missing_fields(self):
        with self.assertRaises(MissingCredentials):
            login('login@test.com', '')
        with self.assertRaises(MissingCredentials):
            login(None, 'secret1')

    def test_token_carries_user_id(self):
        payload = decode_token(issue_token(self.profile))
        self.assertEqual(payload['id'], self.profile.key)

    def test_expired_token_rejected(self):
        past = timezone.now() - timedelta(hours=1)
        token = jwt.encode(
            {'id': self.profile.key, 'iat': past, 'exp': past + timedelta(minutes=1)},
            settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
        )
        with self.assertRaises(InvalidToken):
            decode_token(token)

    def test_token_signed_with_other_secret_rejected(self):
        token = jwt.encode({'id': self.profile.key}, 'some-other-secret', algorithm='HS256')
        with self.assertRaises(InvalidToken):
            decode_token(token)


class FollowTestCase(TestCase):

    def setUp(self):
        self.alice = register('Alice', 'alice@test.com', 'secret1')
        self.bob = register('Bob', 'bob@test.com', 'secret1')

    def test_follow_updates_both_sides(self):
        result = follow_or_unfollow(self.alice, self.bob.key)

        self.assertEqual(result.action, 'followed')
        self.alice.refresh_from_db()
        self.bob.refresh_from_db()
        self.assertEqual(self.alice.following, [{'userId': self.bob.key}])
        self.assertEqual(self.bob.followers, [{'userId': self.alice.key}])

    def test_follow_notifies_target(self):
        follow_or_unfollow(self.alice, self.bob.key)

        notification = Notification.objects.get()
        self.assertEqual(notification.type, Notification.Type.FOLLOW)
        self.assertEqual(notification.title, 'Followed you')
        self.assertEqual(notification.user_id, self.bob.key)
        self.assertEqual(notification.creator['_id'], self.alice.key)

    def test_follow_then_unfollow_leaves_nothing(self):
        follow_or_unfollow(self.alice, self.bob.key)
        result = follow_or_unfollow(self.alice, self.bob.key)

        self.assertEqual(result.action, 'unfollowed')
        self.alice.refresh_from_db()
        self.bob.refresh_from_db()
        self.assertEqual(self.alice.following, [])
        self.assertEqual(self.bob.followers, [])
        self.assertEqual(
            Notification.objects.filter(type=Notification.Type.FOLLOW).count(), 0
        )

    def test_unfollow_keeps_other_edges(self):
        carol = register('Carol', 'carol@test.com', 'secret1')
        follow_or_unfollow(self.alice, self.bob.key)
        follow_or_unfollow(self.alice, carol.key)
        follow_or_unfollow(self.alice, self.bob.key)

        self.alice.refresh_from_db()
        self.assertEqual(self.alice.following, [{'userId': carol.key}])
        self.assertEqual(Notification.objects.filter(user_id=carol.key).count(), 1)

    def test_cannot_follow_self(self):
        with self.assertRaises(ValidationError):
            follow_or_unfollow(self.alice, self.alice.key)

    def test_unknown_target(self):
        with self.assertRaises(NotFound):
            follow_or_unfollow(self.alice, '999999')


class PostLikeTestCase(TestCase):
    """Post-level like toggling and its notification."""

    def setUp(self):
        self.author = register('Author', 'author@test.com', 'secret1')
        self.liker = register('Liker', 'liker@test.com', 'secret1')
        self.post = create_post(self.author, title='Hello world')

    def test_like_then_unlike_round_trip(self):
        result = toggle_like(self.liker, self.post.key)
        self.assertEqual(result.action, 'added')

        notification = Notification.objects.get()
        self.assertEqual(notification.type, Notification.Type.LIKE)
        self.assertEqual(notification.creator_id, self.liker.key)
        self.assertEqual(notification.user_id, self.author.key)
        self.assertEqual(notification.post_id, self.post.key)
        self.assertEqual(notification.title, 'Hello world')

        result = toggle_like(self.liker, self.post.key)
        self.assertEqual(result.action, 'removed')

        self.post.refresh_from_db()
        self.assertEqual(self.post.likes, [])
        self.assertEqual(Notification.objects.count(), 0)

    def test_odd_number_of_toggles_leaves_one_like(self):
        for _ in range(5):
            toggle_like(self.liker, self.post.key)

        self.post.refresh_from_db()
        self.assertEqual(len(self.post.likes), 1)
        self.assertEqual(self.post.likes[0]['userId'], self.liker.key)
        self.assertEqual(Notification.objects.count(), 1)

    def test_unlike_only_retracts_that_posts_notification(self):
        second = create_post(self.author, title='Second post')

        toggle_like(self.liker, self.post.key)
        toggle_like(self.liker, second.key)
        toggle_like(self.liker, second.key)

        remaining = list(Notification.objects.values_list('post_id', flat=True))
        self.assertEqual(remaining, [self.post.key])

    def test_long_title_is_kept_whole(self):
        post = create_post(self.author, title='x' * 400)
        toggle_like(self.liker, post.key)

        self.assertEqual(Notification.objects.get().title, 'x' * 400)
        self.assertEqual(Notification._meta.get_field('title').get_internal_type(), 'TextField')

    def test_post_like_entry_shape(self):
        toggle_like(self.liker, self.post.key)

        self.post.refresh_from_db()
        like = self.post.likes[0]
        self.assertEqual(like['name'], 'Liker')
        self.assertEqual(like['userName'], self.liker.user_name)
        self.assertEqual(like['postId'], self.post.key)
        self.assertIn('userAvatar', like)

    def test_self_like_never_notifies(self):
        toggle_like(self.author, self.post.key)
        toggle_like(self.author, self.post.key)
        toggle_like(self.author, self.post.key)

        self.post.refresh_from_db()
        self.assertEqual(len(self.post.likes), 1)
        self.assertEqual(Notification.objects.count(), 0)

    def test_untitled_post_uses_fallback_title(self):
        post = create_post(self.author, title='')
        toggle_like(self.liker, post.key)

        self.assertEqual(Notification.objects.get().title, 'Liked your post')

    def test_missing_post(self):
        with self.assertRaises(NotFound):
            toggle_like(self.liker, '424242')
        with self.assertRaises(NotFound):
            toggle_like(self.liker, 'not-a-number')


class ReplyTreeTestCase(TestCase):
    """Adding replies at depth 1 and depth 2."""

    def setUp(self):
        self.author = register('Author', 'author@test.com', 'secret1')
        self.replier = register('Replier', 'replier@test.com', 'secret1')
        self.post = create_post(self.author, title='Thread')

    def test_add_depth_one_reply(self):
        post = add_replies(self.replier, self.post.key, 'First!')

        self.assertEqual(len(post.replies), 1)
        reply = post.replies[0]
        self.assertEqual(len(reply['_id']), 24)
        self.assertEqual(reply['title'], 'First!')
        self.assertEqual(reply['likes'], [])
        self.assertEqual(reply['reply'], [])
        self.assertEqual(reply['user']['_id'], self.replier.key)

    def test_reply_notifies_post_owner(self):
        add_replies(self.replier, self.post.key, 'Nice post')

        notification = Notification.objects.get()
        self.assertEqual(notification.type, Notification.Type.REPLY)
        self.assertEqual(notification.user_id, self.author.key)
        self.assertEqual(notification.post_id, self.post.key)

    def test_replying_to_own_post_does_not_notify(self):
        add_replies(self.author, self.post.key, 'Bump')
        self.assertEqual(Notification.objects.count(), 0)

    def test_add_replies_missing_post(self):
        with self.assertRaises(NotFound):
            add_replies(self.replier, '31337', 'Hello?')

    def test_add_depth_two_reply(self):
        post = add_replies(self.replier, self.post.key, 'Depth one')
        reply_id = post.replies[0]['_id']

        post = add_reply(self.author, self.post.key, reply_id, 'Depth two')

        nested = post.replies[0]['reply']
        self.assertEqual(len(nested), 1)
        self.assertEqual(nested[0]['title'], 'Depth two')
        self.assertEqual(nested[0]['user']['_id'], self.author.key)

    def test_nested_reply_notifies_reply_author(self):
        post = add_replies(self.replier, self.post.key, 'Depth one')
        Notification.objects.all().delete()

        add_reply(self.author, self.post.key, post.replies[0]['_id'], 'Answer')

        notification = Notification.objects.get()
        self.assertEqual(notification.type, Notification.Type.REPLY)
        self.assertEqual(notification.user_id, self.replier.key)

    def test_nested_reply_to_missing_reply_leaves_post_unchanged(self):
        add_replies(self.replier, self.post.key, 'Depth one')
        self.post.refresh_from_db()
        before = self.post.replies

        with patch('cloudinary.uploader.upload') as upload:
            with self.assertRaises(ReplyNotFound) as ctx:
                add_reply(self.author, self.post.key, 'ffffffffffffffffffffffff', 'Lost', image='data:x')

        self.assertEqual(ctx.exception.status_code, 401)
        upload.assert_not_called()
        self.post.refresh_from_db()
        self.assertEqual(self.post.replies, before)

    def test_reply_removed_during_upload_still_reports_missing_reply(self):
        post = add_replies(self.replier, self.post.key, 'Depth one')
        reply_id = post.replies[0]['_id']

        def upload_while_thread_changes(payload, folder):
            Post.objects.filter(pk=self.post.pk).update(replies=[])
            return {'public_id': 'posts/late', 'url': 'https://res.cloudinary.com/demo/posts/late.png'}

        with patch('social.services.upload_optional', side_effect=upload_while_thread_changes), \
                patch('cloudinary.uploader.destroy', side_effect=CloudinaryError('down')) as destroy, \
                self.assertLogs('social.images', level='ERROR'):
            with self.assertRaises(ReplyNotFound):
                add_reply(self.author, self.post.key, reply_id, 'Too late', image='data:x')

        destroy.assert_called_once_with('posts/late')

    def test_nested_reply_missing_post(self):
        with self.assertRaises(NotFound):
            add_reply(self.author, '31337', 'ffffffffffffffffffffffff', 'Lost')

    def test_reply_image_uploaded(self):
        with patch('cloudinary.uploader.upload', return_value=upload_result('posts/r1')):
            post = add_replies(self.replier, self.post.key, 'With pic', image='data:image/png;base64,AA')

        self.assertEqual(post.replies[0]['image']['public_id'], 'posts/r1')


class ThreadAddressingTestCase(TestCase):
    """The path resolver on plain reply lists."""

    def setUp(self):
        user = {'_id': '1', 'name': 'U'}
        self.child = build_reply(user, 'child')
        self.top = build_reply(user, 'top')
        self.top['reply'].append(self.child)
        self.replies = [build_reply(user, 'other'), self.top]

    def test_resolve_each_depth(self):
        self.assertIs(resolve(self.replies, [self.top['_id']]), self.top)
        self.assertIs(resolve(self.replies, [self.top['_id'], self.child['_id']]), self.child)

    def test_resolve_missing(self):
        self.assertIsNone(resolve(self.replies, ['nope']))
        self.assertIsNone(resolve(self.replies, [self.top['_id'], 'nope']))
        self.assertIsNone(resolve(self.replies, []))

    def test_depth_is_capped(self):
        too_deep = ['a'] * (MAX_REPLY_DEPTH + 1)
        with self.assertRaises(ValueError):
            resolve(self.replies, too_deep)

    def test_nested_like_path_too_deep(self):
        author = register('Author', 'author@test.com', 'secret1')
        post = create_post(author, title='Deep')
        with self.assertRaises(ValidationError):
            toggle_like(author, post.key, path=['a', 'b', 'c'])


class ReplyLikeTestCase(TestCase):
    """Like toggling on depth-1 and depth-2 replies."""

    def setUp(self):
        self.author = register('Author', 'author@test.com', 'secret1')
        self.replier = register('Replier', 'replier@test.com', 'secret1')
        self.liker = register('Liker', 'liker@test.com', 'secret1')
        self.post = create_post(self.author, title='Thread')
        post = add_replies(self.replier, self.post.key, 'Depth one')
        self.reply_id = post.replies[0]['_id']
        post = add_reply(self.author, self.post.key, self.reply_id, 'Depth two')
        self.nested_id = post.replies[0]['reply'][0]['_id']
        Notification.objects.all().delete()

    def test_reply_like_toggle(self):
        result = toggle_like(self.liker, self.post.key, path=[self.reply_id], reply_title='Depth one')
        self.assertEqual(result.action, 'added')
        self.assertEqual(result.message, 'Like added to reply successfully')

        self.post.refresh_from_db()
        likes = self.post.replies[0]['likes']
        self.assertEqual(len(likes), 1)
        self.assertNotIn('postId', likes[0])

        notification = Notification.objects.get()
        self.assertEqual(notification.type, Notification.Type.LIKE)
        self.assertEqual(notification.user_id, self.replier.key)
        self.assertEqual(notification.post_id, self.post.key)
        self.assertEqual(notification.title, 'Depth one')

        result = toggle_like(self.liker, self.post.key, path=[self.reply_id])
        self.assertEqual(result.action, 'removed')
        self.post.refresh_from_db()
        self.assertEqual(self.post.replies[0]['likes'], [])
        self.assertEqual(Notification.objects.count(), 0)

    def test_nested_reply_like_toggle(self):
        path = [self.reply_id, self.nested_id]
        toggle_like(self.liker, self.post.key, path=path)

        self.post.refresh_from_db()
        nested = self.post.replies[0]['reply'][0]
        self.assertEqual(len(nested['likes']), 1)
        self.assertEqual(self.post.replies[0]['likes'], [])

        notification = Notification.objects.get()
        self.assertEqual(notification.user_id, self.author.key)
        self.assertEqual(notification.title, 'Liked your Reply')

        toggle_like(self.liker, self.post.key, path=path)
        self.assertEqual(Notification.objects.count(), 0)

    def test_reply_like_retraction_is_scoped_by_post(self):
        other = create_post(self.author, title='Other')
        other = add_replies(self.replier, other.key, 'Elsewhere')
        other_reply = other.replies[0]['_id']

        toggle_like(self.liker, self.post.key, path=[self.reply_id])
        toggle_like(self.liker, other.key, path=[other_reply])
        toggle_like(self.liker, self.post.key, path=[self.reply_id])

        remaining = Notification.objects.filter(type=Notification.Type.LIKE)
        self.assertEqual(remaining.count(), 1)
        self.assertEqual(remaining.get().post_id, other.key)

    def test_self_like_on_reply_never_notifies(self):
        toggle_like(self.replier, self.post.key, path=[self.reply_id])
        toggle_like(self.author, self.post.key, path=[self.reply_id, self.nested_id])

        self.assertEqual(Notification.objects.count(), 0)

    def test_missing_reply(self):
        with self.assertRaises(NotFound) as ctx:
            toggle_like(self.liker, self.post.key, path=['0' * 24])
        self.assertEqual(str(ctx.exception.detail), 'Reply not found')

        with self.assertRaises(NotFound):
            toggle_like(self.liker, self.post.key, path=[self.reply_id, '0' * 24])


class PostLifecycleTestCase(TestCase):

    def setUp(self):
        self.author = register('Author', 'author@test.com', 'secret1')

    def test_create_post_with_seeded_replies(self):
        uploads = [upload_result('posts/main'), upload_result('posts/seed')]
        with patch('cloudinary.uploader.upload', side_effect=uploads):
            post = create_post(
                self.author,
                title='Seeded',
                image='data:image/png;base64,AA',
                replies=[
                    {'title': 'seed one', 'image': 'data:image/png;base64,BB'},
                    {'title': 'seed two'},
                ],
            )

        self.assertEqual(post.image['public_id'], 'posts/main')
        self.assertEqual(len(post.replies), 2)
        self.assertEqual(post.replies[0]['image']['public_id'], 'posts/seed')
        self.assertIsNone(post.replies[1]['image'])
        self.assertNotEqual(post.replies[0]['_id'], post.replies[1]['_id'])
        self.assertEqual(post.replies[1]['user']['_id'], self.author.key)
        self.assertEqual(post.user['_id'], self.author.key)

    def test_delete_post_destroys_images(self):
        uploads = [upload_result('posts/main'), upload_result('posts/reply')]
        with patch('cloudinary.uploader.upload', side_effect=uploads):
            post = create_post(self.author, title='Bye', image='data:a')
            add_replies(self.author, post.key, 'r', image='data:b')

        with patch('cloudinary.uploader.destroy') as destroy:
            with self.captureOnCommitCallbacks(execute=True):
                delete_post(post.key)

        destroyed = sorted(call.args[0] for call in destroy.call_args_list)
        self.assertEqual(destroyed, ['posts/main', 'posts/reply'])
        self.assertFalse(Post.objects.filter(pk=post.pk).exists())

    def test_delete_missing_post(self):
        with self.assertRaises(NotFound) as ctx:
            delete_post('999')
        self.assertEqual(str(ctx.exception.detail), 'Post is not found with this id')

    def test_image_ids_walks_thread(self):
        post = create_post(self.author, title='No images')
        self.assertEqual(image_ids(post), [])


class AppLoadingTestCase(SimpleTestCase):
    """The project must boot in a fresh interpreter, not just inside the test run."""

    def run_python(self, code):
        env = dict(os.environ, DJANGO_SETTINGS_MODULE='threadline.settings')
        return subprocess.run(
            [sys.executable, '-c', code],
            cwd=BACKEND_DIR,
            env=env,
            capture_output=True,
            text=True,
        )

    def test_setup_then_auth_modules(self):
        result = self.run_python(
            'import django; django.setup(); '
            'import social.accounts, social.authentication, social.views'
        )
        self.assertEqual(result.returncode, 0, result.stderr)

    def test_drf_settings_resolve(self):
        result = self.run_python(
            'import django; django.setup(); '
            'from rest_framework.settings import api_settings; '
            'api_settings.DEFAULT_AUTHENTICATION_CLASSES; '
            'api_settings.EXCEPTION_HANDLER'
        )
        self.assertEqual(result.returncode, 0, result.stderr)


class ConcurrentWriteTestCase(TransactionTestCase):
    """
    Writers on one post row queue on the row lock, so none of their
    updates to the thread is lost.
    """

    def setUp(self):
        self.author = register('Author', 'author@test.com', 'secret1')
        self.likers = [
            register(f'Liker {i}', f'liker{i}@test.com', 'secret1') for i in range(4)
        ]
        post = create_post(self.author, title='Busy thread')
        for i in range(4):
            post = add_replies(self.author, post.key, f'reply {i}')
        self.post = post
        self.reply_ids = [reply['_id'] for reply in post.replies]

    def run_concurrently(self, jobs):
        barrier = threading.Barrier(len(jobs))
        errors = []

        def worker(job):
            try:
                barrier.wait()
                job()
            except Exception as exc:
                errors.append(exc)
            finally:
                connection.close()

        threads = [threading.Thread(target=worker, args=(job,)) for job in jobs]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        self.assertEqual(errors, [])

    def test_likes_on_sibling_replies_all_persist(self):
        self.run_concurrently([
            partial(toggle_like, liker, self.post.key, path=[reply_id])
            for liker, reply_id in zip(self.likers, self.reply_ids)
        ])

        self.post.refresh_from_db()
        for liker, reply in zip(self.likers, self.post.replies):
            self.assertEqual([like['userId'] for like in reply['likes']], [liker.key])
        self.assertEqual(Notification.objects.filter(type=Notification.Type.LIKE).count(), 4)

    def test_post_likes_and_replies_at_once(self):
        jobs = [partial(toggle_like, liker, self.post.key) for liker in self.likers[:2]]
        jobs += [partial(add_replies, liker, self.post.key, 'late reply') for liker in self.likers[2:]]
        self.run_concurrently(jobs)

        self.post.refresh_from_db()
        self.assertEqual(len(self.post.likes), 2)
        self.assertEqual(len(self.post.replies), 6)

    def test_mutual_follows_at_once(self):
        first, second = self.likers[:2]
        self.run_concurrently([
            partial(follow_or_unfollow, first, second.key),
            partial(follow_or_unfollow, second, first.key),
        ])

        first.refresh_from_db()
        second.refresh_from_db()
        self.assertEqual(first.following, [{'userId': second.key}])
        self.assertEqual(first.followers, [{'userId': second.key}])
        self.assertEqual(second.following, [{'userId': first.key}])

    @skipUnlessDBFeature('has_select_for_update')
    def test_like_reads_post_row_for_update(self):
        with CaptureQueriesContext(connection) as queries:
            toggle_like(self.likers[0], self.post.key)

        self.assertTrue(any('FOR UPDATE' in query['sql'] for query in queries.captured_queries))


class SeedDataTestCase(TestCase):

    def test_reported_like_count_matches_stored_likes(self):
        out = StringIO()
        call_command('seed_data', users=4, posts=3, replies=6, stdout=out)

        stored = 0
        for post in Post.objects.all():
            stored += len(post.likes)
            stored += sum(len(reply.get('likes') or []) for _, reply in walk(post.replies))

        reported = int(re.search(r'(\d+) likes', out.getvalue()).group(1))
        self.assertEqual(reported, stored)
