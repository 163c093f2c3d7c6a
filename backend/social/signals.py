"""
Django Signals for external storage cleanup.

A post owns every image in its thread: the post image and the images of
its replies at both depths. When the post row goes, those images go too.

WHY ON_COMMIT:
--------------
The destroy calls are network requests to the image store. Running them
only after the deletion commits means a rolled-back delete never loses
images that are still referenced.

Signals fire on Model.delete() and QuerySet.delete(), so the admin's bulk
delete is covered as well.
"""
from functools import partial

from django.db import transaction
from django.db.models.signals import post_delete
from django.dispatch import receiver

from .images import discard_image
from .models import Post
from .threads import image_ids


@receiver(post_delete, sender=Post)
def destroy_post_images(sender, instance, **kwargs):
    for public_id in image_ids(instance):
        transaction.on_commit(partial(discard_image, public_id))
