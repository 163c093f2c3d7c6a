"""
HTTP tests for the /api/v1 surface: routing, response envelopes,
session handling and the bearer header rules.
"""

from unittest.mock import patch

from django.core.cache import cache
from rest_framework.test import APITestCase

from .models import Notification, Post
from .throttling import ClientRateThrottle

API = '/api/v1'


class ApiTestCase(APITestCase):

    def setUp(self):
        # Throttle counters live in the cache
        cache.clear()

    def register(self, name, email, password='secret1'):
        response = self.client.post(f'{API}/registration', {
            'name': name,
            'email': email,
            'password': password,
        }, format='json')
        self.assertEqual(response.status_code, 201, response.data)
        return response.data['user'], response.data['token']

    def as_user(self, token):
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')

    def anonymous(self):
        self.client.credentials()


class SessionApiTest(ApiTestCase):

    def test_registration_returns_user_token_and_cookie(self):
        response = self.client.post(f'{API}/registration', {
            'name': 'Jane Doe',
            'email': 'jane@test.com',
            'password': 'secret1',
        }, format='json')

        self.assertEqual(response.status_code, 201)
        self.assertTrue(response.data['success'])
        self.assertEqual(response.data['user']['email'], 'jane@test.com')
        self.assertTrue(response.data['user']['userName'].startswith('JaneDoe'))
        self.assertNotIn('password', response.data['user'])

        cookie = response.cookies['token']
        self.assertEqual(cookie.value, response.data['token'])
        self.assertTrue(cookie['httponly'])
        self.assertTrue(cookie['secure'])
        self.assertEqual(cookie['samesite'], 'None')
        self.assertEqual(int(cookie['max-age']), 90 * 24 * 60 * 60)

    def test_registration_validation_message(self):
        response = self.client.post(f'{API}/registration', {
            'name': 'No Mail',
            'password': 'secret1',
        }, format='json')

        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.data['success'])
        self.assertTrue(response.data['message'].startswith('email:'))

    def test_duplicate_registration(self):
        self.register('First', 'same@test.com')
        response = self.client.post(f'{API}/registration', {
            'name': 'Second',
            'email': 'same@test.com',
            'password': 'secret2',
        }, format='json')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data, {'success': False, 'message': 'This email already exists'})

    def test_login(self):
        user, _ = self.register('Login', 'login@test.com')

        response = self.client.post(f'{API}/login', {
            'email': 'login@test.com',
            'password': 'secret1',
        }, format='json')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['user']['_id'], user['_id'])
        self.assertIn('token', response.data)

        response = self.client.post(f'{API}/login', {
            'email': 'login@test.com',
            'password': 'wrong-one',
        }, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['message'], 'Invalid email or password')

        response = self.client.post(f'{API}/login', {'email': 'login@test.com'}, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['message'], 'Please enter email and password')

    def test_logout_requires_token(self):
        response = self.client.get(f'{API}/logout')
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.data['message'], 'Please login to continue')

    def test_logout_with_undefined_token(self):
        self.client.credentials(HTTP_AUTHORIZATION='Bearer undefined')
        response = self.client.get(f'{API}/logout')
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.data['message'], 'Please login to continue')

    def test_logout_with_bad_token(self):
        self.client.credentials(HTTP_AUTHORIZATION='Bearer not.a.jwt')
        response = self.client.get(f'{API}/logout')
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.data['message'], 'Invalid token')

    def test_logout_clears_cookie(self):
        _, token = self.register('Bye', 'bye@test.com')
        self.as_user(token)

        response = self.client.get(f'{API}/logout')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['message'], 'Logged out successfully!')
        self.assertEqual(response.cookies['token'].value, '')
        self.assertEqual(int(response.cookies['token']['max-age']), 0)

    def test_me(self):
        user, token = self.register('Me', 'me@test.com')

        response = self.client.get(f'{API}/me')
        self.assertIsNone(response.data['user'])

        self.as_user(token)
        response = self.client.get(f'{API}/me')
        self.assertEqual(response.data['user']['_id'], user['_id'])

    def test_users_excludes_caller(self):
        alice, token = self.register('Alice', 'alice@test.com')
        bob, _ = self.register('Bob', 'bob@test.com')
        self.as_user(token)

        response = self.client.get(f'{API}/users')

        ids = [u['_id'] for u in response.data['users']]
        self.assertEqual(ids, [bob['_id']])

    def test_get_user(self):
        user, _ = self.register('Find Me', 'find@test.com')

        response = self.client.get(f'{API}/get-user/{user["_id"]}')
        self.assertEqual(response.data['user']['name'], 'Find Me')

        response = self.client.get(f'{API}/get-user/424242')
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data['message'], 'User not found')

    def test_update_profile(self):
        _, token = self.register('Old Name', 'edit@test.com')
        self.as_user(token)

        response = self.client.put(f'{API}/update-profile', {
            'name': 'New Name',
            'bio': 'Hello there',
        }, format='json')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['user']['name'], 'New Name')
        self.assertEqual(response.data['user']['bio'], 'Hello there')

    def test_update_avatar_replaces_previous(self):
        _, token = self.register('Pic', 'pic@test.com')
        self.as_user(token)
        uploads = [
            {'public_id': 'avatars/one', 'secure_url': 'https://img/one.png'},
            {'public_id': 'avatars/two', 'secure_url': 'https://img/two.png'},
        ]

        with patch('cloudinary.uploader.upload', side_effect=uploads), \
                patch('cloudinary.uploader.destroy') as destroy:
            self.client.put(f'{API}/update-avatar', {'avatar': 'data:a'}, format='json')
            response = self.client.put(f'{API}/update-avatar', {'avatar': 'data:b'}, format='json')

        destroy.assert_called_once_with('avatars/one')
        self.assertEqual(response.data['user']['avatar'], {'public_id': 'avatars/two', 'url': 'https://img/two.png'})


class ActorResolutionApiTest(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.alice, self.alice_token = self.register('Alice', 'alice@test.com')
        self.bob, self.bob_token = self.register('Bob', 'bob@test.com')

    def test_actor_from_body_without_token(self):
        response = self.client.put(f'{API}/add-user', {
            'user': {'_id': self.alice['_id']},
            'followUserId': self.bob['_id'],
        }, format='json')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['action'], 'followed')
        self.assertEqual(response.data['message'], 'User followed successfully')

    def test_token_wins_over_body(self):
        self.as_user(self.bob_token)
        response = self.client.put(f'{API}/add-user', {
            'user': {'_id': self.alice['_id']},
            'followUserId': self.alice['_id'],
        }, format='json')

        self.assertEqual(response.status_code, 200)
        notification = Notification.objects.get()
        self.assertEqual(notification.creator_id, self.bob['_id'])

    def test_no_actor(self):
        response = self.client.put(f'{API}/add-user', {'followUserId': self.bob['_id']}, format='json')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['message'], 'User is required')

    def test_bad_header_fails_on_actor_route(self):
        self.client.credentials(HTTP_AUTHORIZATION='Bearer garbage')
        response = self.client.put(f'{API}/add-user', {
            'user': {'_id': self.alice['_id']},
            'followUserId': self.bob['_id'],
        }, format='json')

        self.assertEqual(response.status_code, 401)

    def test_bad_header_ignored_on_public_route(self):
        self.client.credentials(HTTP_AUTHORIZATION='Bearer garbage')
        response = self.client.get(f'{API}/posts')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['posts'], [])


class PostFlowApiTest(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.u1, self.t1 = self.register('Poster', 'poster@test.com')
        self.u2, self.t2 = self.register('Fan', 'fan@test.com')

    def create_post(self, title='Hi'):
        self.as_user(self.t1)
        response = self.client.post(f'{API}/create-post', {'title': title}, format='json')
        self.assertEqual(response.status_code, 201, response.data)
        return response.data['post']

    def notifications_for(self, user):
        response = self.client.get(f'{API}/get-notifications/{user["_id"]}')
        return response.data['notifications']

    def test_like_unlike_scenario(self):
        post = self.create_post()
        self.as_user(self.t2)

        response = self.client.put(f'{API}/update-likes', {'postId': post['_id']}, format='json')
        self.assertEqual(response.data['action'], 'added')
        self.assertEqual(response.data['likes'], 1)
        self.assertEqual(response.data['message'], 'Like Added successfully')

        inbox = self.notifications_for(self.u1)
        self.assertEqual(len(inbox), 1)
        self.assertEqual(inbox[0]['type'], 'Like')
        self.assertEqual(inbox[0]['postId'], post['_id'])
        self.assertEqual(inbox[0]['creator']['_id'], self.u2['_id'])

        response = self.client.put(f'{API}/update-likes', {'postId': post['_id']}, format='json')
        self.assertEqual(response.data['action'], 'removed')
        self.assertEqual(response.data['likes'], 0)
        self.assertEqual(self.notifications_for(self.u1), [])

        posts = self.client.get(f'{API}/posts').data['posts']
        self.assertEqual(posts[0]['likes'], [])

    def test_feed_is_newest_first(self):
        first = self.create_post('first')
        second = self.create_post('second')

        posts = self.client.get(f'{API}/posts').data['posts']

        self.assertEqual([p['_id'] for p in posts], [second['_id'], first['_id']])

    def test_reply_routes(self):
        post = self.create_post()
        self.as_user(self.t2)

        response = self.client.put(f'{API}/add-replies', {
            'postId': post['_id'],
            'title': 'depth one',
        }, format='json')
        self.assertEqual(response.status_code, 201)
        reply_id = response.data['post']['replies'][0]['_id']

        # replyId carries the post id and postId the reply id
        self.as_user(self.t1)
        response = self.client.put(f'{API}/add-reply', {
            'replyId': post['_id'],
            'postId': reply_id,
            'title': 'depth two',
        }, format='json')
        self.assertEqual(response.status_code, 201)
        nested = response.data['post']['replies'][0]['reply']
        self.assertEqual([r['title'] for r in nested], ['depth two'])

        response = self.client.put(f'{API}/update-reply-react', {
            'postId': post['_id'],
            'replyId': reply_id,
            'singleReplyId': nested[0]['_id'],
        }, format='json')
        self.assertEqual(response.data['message'], 'Like added to reply successfully')
        self.assertEqual(response.data['likes'], 1)

        self.as_user(self.t1)
        response = self.client.put(f'{API}/update-replies-react', {
            'postId': post['_id'],
            'replyId': reply_id,
            'replyTitle': 'depth one',
        }, format='json')
        self.assertEqual(response.data['action'], 'added')
        inbox = self.notifications_for(self.u2)
        self.assertEqual([n['title'] for n in inbox if n['type'] == 'Like'], ['depth one'])

    def test_add_reply_to_missing_reply(self):
        post = self.create_post()

        response = self.client.put(f'{API}/add-reply', {
            'replyId': post['_id'],
            'postId': 'ffffffffffffffffffffffff',
            'title': 'lost',
        }, format='json')

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.data, {'success': False, 'message': 'Reply not found'})
        self.assertEqual(Post.objects.get(pk=post['_id']).replies, [])

    def test_like_missing_post(self):
        self.as_user(self.t2)
        response = self.client.put(f'{API}/update-likes', {'postId': '99999'}, format='json')

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data['message'], 'Post not found')

    def test_delete_post(self):
        with patch('cloudinary.uploader.upload', return_value={'public_id': 'posts/p', 'secure_url': 'https://img/p.png'}):
            self.as_user(self.t1)
            response = self.client.post(f'{API}/create-post', {'title': 'pic', 'image': 'data:p'}, format='json')
        post_id = response.data['post']['_id']

        with patch('cloudinary.uploader.destroy') as destroy:
            with self.captureOnCommitCallbacks(execute=True):
                response = self.client.delete(f'{API}/delete-post/{post_id}')

        self.assertEqual(response.data, {'success': True})
        destroy.assert_called_once_with('posts/p')

        response = self.client.delete(f'{API}/delete-post/{post_id}')
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data['message'], 'Post is not found with this id')


class ServiceRoutesApiTest(ApiTestCase):

    def test_health(self):
        response = self.client.get('/test')
        self.assertEqual(response.data, {'success': True, 'message': 'API is working'})

    def test_unknown_route(self):
        response = self.client.get('/api/v1/nope')
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data, {'success': False, 'message': 'Route /api/v1/nope not found'})

        response = self.client.post('/elsewhere', {}, format='json')
        self.assertEqual(response.status_code, 404)

    def test_known_path_with_other_method(self):
        response = self.client.post(f'{API}/logout')
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data, {'success': False, 'message': 'Route /api/v1/logout not found'})

        response = self.client.get(f'{API}/login')
        self.assertEqual(response.status_code, 404)

        response = self.client.delete(f'{API}/posts')
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data['message'], 'Route /api/v1/posts not found')

    def test_trace_on_unknown_route(self):
        response = self.client.trace('/nope')
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data['message'], 'Route /nope not found')

    def test_rate_limit(self):
        with patch.object(ClientRateThrottle, 'THROTTLE_RATES', {'client': '2/15m'}):
            self.assertEqual(self.client.get('/test').status_code, 200)
            self.assertEqual(self.client.get('/test').status_code, 200)
            response = self.client.get('/test')

        self.assertEqual(response.status_code, 429)
        self.assertFalse(response.data['success'])
