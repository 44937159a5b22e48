"""
Receipt attachment storage.

Uploaded receipt images are written through a Django Storage under a
freshly generated name, and removed when the owning payment drops or
replaces them. Removal is advisory: a missing file counts as removed and
storage errors are logged, never raised.
"""

import logging
import os
import posixpath
import secrets
from urllib.parse import urlparse

from django.conf import settings
from django.core.files.base import ContentFile, File
from django.core.files.storage import default_storage
from django.utils import timezone

from .exceptions import AttachmentFailure

logger = logging.getLogger(__name__)


class AttachmentManager:
    """
    Map uploaded bytes to a storage key and reclaim superseded files.

    Args:
        storage: Django Storage backend. Defaults to ``default_storage``
            (MEDIA_ROOT on the filesystem).
        upload_dir: Key prefix for receipts. Defaults to
            ``settings.PAYMENT_UPLOAD_DIR``.

    Example::

        attachments = AttachmentManager()
        key = attachments.store(request.FILES['image'], 'nota.jpg')
        # key == 'uploads/receipt_20250101120000123456_a1b2c3d4.jpg'
        attachments.remove(key)
    """

    def __init__(self, storage=None, upload_dir=None):
        self.storage = storage if storage is not None else default_storage
        if upload_dir is None:
            upload_dir = getattr(settings, 'PAYMENT_UPLOAD_DIR', 'uploads')
        self.upload_dir = upload_dir.strip('/')

    def generate_name(self, original_name: str) -> str:
        """Time-based name keeping the original extension."""
        ext = os.path.splitext(original_name or '')[1].lower()
        stamp = timezone.now().strftime('%Y%m%d%H%M%S%f')
        return posixpath.join(self.upload_dir, f"receipt_{stamp}_{secrets.token_hex(4)}{ext}")

    def store(self, content, original_name: str = '') -> str:
        """
        Persist ``content`` and return its storage key.

        Args:
            content: Raw bytes or a Django File/UploadedFile.
            original_name: Client-side file name, only its extension is kept.
                Falls back to ``content.name``.

        Returns:
            The storage key actually used (the backend may adjust it).

        Raises:
            AttachmentFailure: If the storage backend cannot write the file.
        """
        if isinstance(content, (bytes, bytearray)):
            content = ContentFile(bytes(content))
        elif not isinstance(content, File):
            content = File(content)

        name = self.generate_name(original_name or getattr(content, 'name', '') or '')

        try:
            key = self.storage.save(name, content)
        except OSError as e:
            raise AttachmentFailure(f"Could not store attachment {original_name!r}") from e

        logger.info("Stored attachment %s", key)
        return key

    def to_key(self, reference: str) -> str:
        """Translate a stored reference or its public URL back to a storage key."""
        path = urlparse(reference).path if '://' in reference else reference
        media_url = getattr(settings, 'MEDIA_URL', '') or ''
        if media_url and path.startswith(media_url):
            path = path[len(media_url):]
        return path.lstrip('/')

    def url(self, reference):
        """Public URL for a stored reference, None when there is none."""
        if not reference:
            return None
        return self.storage.url(self.to_key(reference))

    def remove(self, reference) -> bool:
        """
        Best-effort deletion of a stored attachment.

        Returns:
            True if a file was deleted, False if there was nothing to delete
            or the deletion failed (failures are logged).
        """
        if not reference:
            return False

        key = posixpath.normpath(self.to_key(reference))
        prefix = self.upload_dir + '/' if self.upload_dir else ''
        if key == '..' or key.startswith(('../', '/')) or not key.startswith(prefix):
            logger.warning("Refusing to remove %r outside %s/", reference, self.upload_dir)
            return False

        try:
            if not self.storage.exists(key):
                logger.debug("Attachment %s already gone", key)
                return False
            self.storage.delete(key)
        except OSError:
            logger.warning("Failed to remove attachment %s", key, exc_info=True)
            return False

        logger.info("Removed attachment %s", key)
        return True
