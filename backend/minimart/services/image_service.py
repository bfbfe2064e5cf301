"""
Product Image Service - uploads to Supabase Storage

Images go to the public 'product-images' bucket under a generated unique
name; the returned public URL is what products store in image_url.

Author: MiniMart Dev Team
Date: 2026-10-19
"""
import logging
import os
import time
import uuid
from typing import Optional

import httpx
from storage3.utils import StorageException
from supabase import Client

from minimart.core.errors import RemoteDataError, ValidationError

logger = logging.getLogger(__name__)

PRODUCT_IMAGE_BUCKET = "product-images"


def storage_object_name(filename: str, now: Optional[float] = None) -> str:
    """<epoch-ms>-<random>.<ext>, keeping the uploaded file's extension"""
    extension = os.path.splitext(filename or "")[1].lower()
    millis = int((now if now is not None else time.time()) * 1000)
    return f"{millis}-{uuid.uuid4().hex[:12]}{extension}"


def upload_product_image(client: Client, filename: str, content: bytes, content_type: Optional[str]) -> str:
    """
    Upload one product image and return its public URL

    Raises:
        ValidationError if the file is empty or not an image (nothing is uploaded)
        RemoteDataError if Storage rejects the upload
    """
    if not content_type or not content_type.startswith("image/"):
        raise ValidationError("Please upload an image file", errors=[f"file: unsupported type {content_type}"])
    if not content:
        raise ValidationError("Please upload an image file", errors=["file: empty upload"])

    name = storage_object_name(filename)
    bucket = client.storage.from_(PRODUCT_IMAGE_BUCKET)
    try:
        bucket.upload(name, content, {"content-type": content_type})
        public_url = bucket.get_public_url(name)
    except (StorageException, httpx.HTTPError) as e:
        logger.error(f"Upload of {filename} to '{PRODUCT_IMAGE_BUCKET}' failed: {e}")
        raise RemoteDataError(f"Failed to upload image {filename}: {e}") from e

    logger.info(f"Uploaded product image {name} ({len(content)} bytes)")
    return public_url
