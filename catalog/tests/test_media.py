from unittest.mock import patch

from cloudinary.exceptions import Error as CloudinaryError
from django.test import SimpleTestCase

from authentication.core.exceptions import BlobDeleteError, BlobUploadError
from catalog.services.media import CloudinaryBlobStore, extract_public_id


class ExtractPublicIdTests(SimpleTestCase):
    def test_skips_version_query_and_extension(self):
        url = 'https://res.cloudinary.com/demo/image/upload/v1712345/shop/shoes/abc.jpg?_a=1'
        self.assertEqual(extract_public_id(url), 'shop/shoes/abc')

    def test_rejects_non_cloudinary_url(self):
        with self.assertRaises(BlobDeleteError):
            extract_public_id('https://example.com/images/abc.jpg')


@patch('catalog.services.media.cloudinary.uploader')
class CloudinaryBlobStoreTests(SimpleTestCase):
    def test_store_uses_folder(self, uploader):
        uploader.upload.return_value = {'secure_url': 'https://res.cloudinary.com/demo/image/upload/v1/shop/a.jpg'}
        url = CloudinaryBlobStore(folder='shop').store(b'bytes')

        self.assertEqual(url, 'https://res.cloudinary.com/demo/image/upload/v1/shop/a.jpg')
        uploader.upload.assert_called_once_with(b'bytes', resource_type='image', folder='shop')

    def test_store_many_is_all_or_nothing(self, uploader):
        uploader.upload.side_effect = [
            {'secure_url': 'https://res.cloudinary.com/demo/image/upload/v1/shop/a.jpg'},
            CloudinaryError('quota exceeded'),
        ]
        uploader.destroy.return_value = {'result': 'ok'}

        with self.assertRaises(BlobUploadError):
            CloudinaryBlobStore().store_many([b'one', b'two'])
        uploader.destroy.assert_called_once_with('shop/a', resource_type='image')

    def test_delete_raises_when_not_ok(self, uploader):
        uploader.destroy.return_value = {'result': 'not found'}
        with self.assertRaises(BlobDeleteError):
            CloudinaryBlobStore().delete('https://res.cloudinary.com/demo/image/upload/v1/a.jpg')
