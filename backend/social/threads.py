"""
Reply Tree Addressing
=====================

A post carries its thread inline:

    post.replies            depth 1
      reply["reply"]        depth 2

A reply is addressed by a PATH: the list of reply ids from the post down to
the target. [] is the post itself, [r1] a depth-1 reply, [r1, r2] a reply to
r1. Every level is resolved the same way, a linear scan comparing ids as
strings, so there is one lookup routine instead of one per depth.

WHY A LINEAR SCAN:
- Threads are small (tens of replies), the list is already in memory
- Keeping insertion order matters more than lookup speed

The maximum depth is fixed at 2. No endpoint writes deeper and resolve()
refuses longer paths.
"""

from typing import Iterator, Optional, Sequence

from .models import new_object_id, iso_now

MAX_REPLY_DEPTH = 2


def children_of(node: dict) -> list:
    """The child list of a reply node, created on first access."""
    children = node.get('reply')
    if children is None:
        children = node['reply'] = []
    return children


def find_reply(replies: list, reply_id) -> Optional[dict]:
    """Return the reply in `replies` whose _id matches, or None."""
    wanted = str(reply_id)
    for reply in replies:
        if str(reply.get('_id')) == wanted:
            return reply
    return None


def resolve(replies: list, path: Sequence) -> Optional[dict]:
    """
    Walk `path` down from a post's top-level `replies`.

    Returns the addressed reply, or None when any step is missing.
    An empty path addresses the post, which is not a reply: returns None.
    """
    if len(path) > MAX_REPLY_DEPTH:
        raise ValueError(f"Replies nest at most {MAX_REPLY_DEPTH} levels deep")

    node = None
    level = replies
    for reply_id in path:
        node = find_reply(level, reply_id)
        if node is None:
            return None
        level = children_of(node)
    return node


def build_reply(user: dict, title: str, image: Optional[dict] = None) -> dict:
    """A fresh reply node with a generated id and no likes."""
    return {
        '_id': new_object_id(),
        'user': user,
        'title': title,
        'image': image,
        'likes': [],
        'reply': [],
        'createdAt': iso_now(),
    }


def build_like(user: dict, post_id: Optional[str] = None) -> dict:
    """
    A like entry. Only post-level likes carry postId.
    """
    like = {
        'name': user.get('name'),
        'userName': user.get('userName'),
        'userId': str(user.get('_id')),
        'userAvatar': (user.get('avatar') or {}).get('url'),
    }
    if post_id is not None:
        like['postId'] = str(post_id)
    return like


def find_like(likes: list, user_id) -> Optional[dict]:
    wanted = str(user_id)
    for like in likes:
        if str(like.get('userId')) == wanted:
            return like
    return None


def walk(replies: list, depth: int = 1) -> Iterator[tuple]:
    """Yield (depth, reply) for every reply in the thread, parents first."""
    for reply in replies:
        yield depth, reply
        yield from walk(reply.get('reply') or [], depth + 1)


def image_ids(post) -> list:
    """public_ids of every image referenced by a post and its thread."""
    ids = []
    if post.image and post.image.get('public_id'):
        ids.append(post.image['public_id'])
    for _, reply in walk(post.replies or []):
        image = reply.get('image')
        if image and image.get('public_id'):
            ids.append(image['public_id'])
    return ids
