import logging

import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError

from authentication.core.exceptions import BlobUploadError, BlobDeleteError
from commerce_api.conf import StoreConfig

logger = logging.getLogger(__name__)


def extract_public_id(url):
    """
    Cloudinary public id from a delivery URL: everything after
    ``upload/<version>/`` without the query string or file extension.
    """
    parts = url.split('/')
    try:
        upload_index = parts.index('upload')
    except ValueError:
        raise BlobDeleteError(f"Invalid Cloudinary URL: {url}")
    path = '/'.join(parts[upload_index + 2:]).split('?')[0]
    folder, _, filename = path.rpartition('/')
    filename = filename.rsplit('.', 1)[0]
    return f"{folder}/{filename}" if folder else filename


class CloudinaryBlobStore:
    """Stores images on Cloudinary and deletes them by URL."""

    def __init__(self, folder=''):
        self.folder = folder

    # ---------------------------
    # UPLOAD
    # ---------------------------
    def store(self, file):
        options = {'resource_type': 'image'}
        if self.folder:
            options['folder'] = self.folder
        try:
            result = cloudinary.uploader.upload(file, **options)
        except (CloudinaryError, OSError) as e:
            logger.error(f"Cloudinary upload failed: {e}")
            raise BlobUploadError(f"Image upload failed: {e}")
        return result['secure_url']

    def store_many(self, files):
        """Upload every file or none: earlier uploads are removed when one fails."""
        urls = []
        try:
            for file in files:
                urls.append(self.store(file))
        except BlobUploadError:
            if urls:
                logger.warning(f"Upload batch failed, cleaning up {len(urls)} uploaded images")
                self.delete_quietly(urls)
            raise
        return urls

    # ---------------------------
    # DELETE
    # ---------------------------
    def delete(self, urls):
        if isinstance(urls, str):
            urls = [urls]
        for url in urls:
            public_id = extract_public_id(url)
            try:
                result = cloudinary.uploader.destroy(public_id, resource_type='image')
            except CloudinaryError as e:
                raise BlobDeleteError(f"Failed to delete image {public_id}: {e}")
            if result.get('result') != 'ok':
                raise BlobDeleteError(f"Failed to delete image {public_id}: {result.get('result')}")
            logger.info(f"Deleted image {public_id} from Cloudinary")

    def delete_quietly(self, urls):
        """Best-effort delete used by cascades; failures are logged, not raised."""
        if not urls:
            return
        try:
            self.delete(urls)
        except BlobDeleteError as e:
            logger.warning(f"Image cleanup failed: {e.detail}")


def get_blob_store(config=None):
    config = config or StoreConfig.from_settings()
    return CloudinaryBlobStore(folder=config.cloudinary_folder)
