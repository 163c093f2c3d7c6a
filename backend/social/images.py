"""
Cloud image storage.

Images arrive as base64 data URIs (or remote URLs) in request bodies and are
handed to Cloudinary. What we persist is the reference pair
{"public_id", "url"}; the bytes never touch our database.
"""
import logging
from typing import Optional

import cloudinary
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError
from django.conf import settings

from .exceptions import UpstreamFailure

logger = logging.getLogger(__name__)

AVATAR_FOLDER = 'avatars'
POST_FOLDER = 'posts'


def configure():
    """Called once from SocialConfig.ready()."""
    cloudinary.config(**settings.CLOUDINARY)


def upload_image(payload: str, folder: str, **options) -> dict:
    """Upload one image and return its reference pair."""
    try:
        result = cloudinary.uploader.upload(payload, folder=folder, **options)
    except CloudinaryError as exc:
        logger.warning(f"Image upload to {folder} failed: {exc}")
        raise UpstreamFailure(f"Image upload failed: {exc}")
    return {
        'public_id': result['public_id'],
        'url': result['secure_url'],
    }


def upload_optional(payload: Optional[str], folder: str, **options) -> Optional[dict]:
    if not payload:
        return None
    return upload_image(payload, folder, **options)


def destroy_image(public_id: str) -> None:
    try:
        cloudinary.uploader.destroy(public_id)
    except CloudinaryError as exc:
        logger.warning(f"Image delete for {public_id} failed: {exc}")
        raise UpstreamFailure(f"Image delete failed: {exc}")


def discard_image(public_id: str) -> None:
    """Best-effort destroy for images nothing references any more."""
    try:
        destroy_image(public_id)
    except UpstreamFailure:
        logger.error(f"Orphaned image {public_id}: delete failed, remove it by hand")
