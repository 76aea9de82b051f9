import hashlib
from unittest.mock import MagicMock, patch

import requests
from django.contrib.auth import get_user_model
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import SimpleTestCase, TestCase, override_settings
from django.urls import reverse
from rest_framework.test import APIClient

from .services.cloudinary import full_public_id, sign_params

User = get_user_model()

CLOUDINARY_SETTINGS = {
    'CLOUDINARY_CLOUD_NAME': 'demo',
    'CLOUDINARY_API_KEY': 'key123',
    'CLOUDINARY_API_SECRET': 'secret456',
    'CLOUDINARY_BASE_URL': 'https://api.cloudinary.com/v1_1',
    'CLOUDINARY_FOLDER': 'getsetride/cars',
}


def cloudinary_response(payload, status_code=200):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(response=response)
    return response


def image(name='car.jpg', size=10, content_type='image/jpeg'):
    return SimpleUploadedFile(name, b'x' * size, content_type=content_type)


@override_settings(**CLOUDINARY_SETTINGS)
class CloudinaryHelperTests(SimpleTestCase):
    def test_signature_sorts_params_and_appends_secret(self):
        expected = hashlib.sha1(b'folder=cars&timestamp=1315060510abcd').hexdigest()
        self.assertEqual(sign_params({'timestamp': 1315060510, 'folder': 'cars'}, 'abcd'), expected)

    def test_signature_skips_empty_values(self):
        self.assertEqual(
            sign_params({'timestamp': 1, 'folder': ''}, 's'),
            sign_params({'timestamp': 1}, 's'),
        )

    def test_bare_public_id_gets_folder(self):
        self.assertEqual(full_public_id('abc'), 'getsetride/cars/abc')
        self.assertEqual(full_public_id('other/abc'), 'other/abc')


@override_settings(**CLOUDINARY_SETTINGS)
class UploadApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(email='host@example.com', password='secret123', full_name='Host')
        self.client.force_authenticate(user=self.user)

    def test_requires_authentication(self):
        self.client.force_authenticate(user=None)
        response = self.client.post(reverse('upload-single'), {'image': image()}, format='multipart')
        self.assertEqual(response.status_code, 401)

    @patch('uploads.services.cloudinary.requests.post')
    def test_single_upload(self, mock_post):
        mock_post.return_value = cloudinary_response({
            'secure_url': 'https://res.cloudinary.com/demo/image/upload/getsetride/cars/abc.jpg',
            'public_id': 'getsetride/cars/abc',
        })

        response = self.client.post(reverse('upload-single'), {'image': image()}, format='multipart')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['data']['publicId'], 'getsetride/cars/abc')
        self.assertTrue(response.data['data']['url'].startswith('https://'))
        args, kwargs = mock_post.call_args
        self.assertEqual(args[0], 'https://api.cloudinary.com/v1_1/demo/image/upload')
        self.assertEqual(kwargs['data']['folder'], 'getsetride/cars')
        self.assertEqual(kwargs['data']['transformation'], 'c_limit,h_800,q_auto,w_1200')
        self.assertEqual(kwargs['data']['api_key'], 'key123')
        self.assertIn('signature', kwargs['data'])

    def test_missing_image(self):
        response = self.client.post(reverse('upload-single'), {}, format='multipart')
        self.assertEqual(response.status_code, 400)
        self.assertIn('No image file provided', response.data['message'])

    @patch('uploads.services.cloudinary.requests.post')
    def test_rejects_non_images(self, mock_post):
        doc = image('notes.pdf', content_type='application/pdf')
        response = self.client.post(reverse('upload-single'), {'image': doc}, format='multipart')
        self.assertEqual(response.status_code, 400)
        self.assertIn('Only image files are allowed!', response.data['message'])
        mock_post.assert_not_called()

    @override_settings(UPLOAD_MAX_FILE_SIZE=100)
    @patch('uploads.services.cloudinary.requests.post')
    def test_rejects_large_files(self, mock_post):
        response = self.client.post(reverse('upload-single'), {'image': image(size=101)}, format='multipart')
        self.assertEqual(response.status_code, 400)
        mock_post.assert_not_called()

    @patch('uploads.services.cloudinary.requests.post')
    def test_upload_failure(self, mock_post):
        mock_post.return_value = cloudinary_response({'error': {'message': 'Invalid'}}, status_code=401)
        response = self.client.post(reverse('upload-single'), {'image': image()}, format='multipart')
        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.data['message'], 'Failed to upload image')

    @patch('uploads.services.cloudinary.requests.post')
    def test_multiple_upload(self, mock_post):
        mock_post.side_effect = [
            cloudinary_response({'secure_url': 'https://img/1.jpg', 'public_id': 'getsetride/cars/1'}),
            cloudinary_response({'secure_url': 'https://img/2.jpg', 'public_id': 'getsetride/cars/2'}),
        ]
        response = self.client.post(
            reverse('upload-multiple'), {'images': [image('a.jpg'), image('b.png', content_type='image/png')]},
            format='multipart',
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['message'], '2 image(s) uploaded successfully')
        self.assertEqual([item['publicId'] for item in response.data['data']], ['getsetride/cars/1', 'getsetride/cars/2'])

    @patch('uploads.services.cloudinary.requests.post')
    def test_multiple_upload_limit(self, mock_post):
        files = [image(f'{i}.jpg') for i in range(7)]
        response = self.client.post(reverse('upload-multiple'), {'images': files}, format='multipart')
        self.assertEqual(response.status_code, 400)
        self.assertIn('at most 6 images', response.data['message'])
        mock_post.assert_not_called()

    @patch('uploads.services.cloudinary.requests.post')
    def test_delete(self, mock_post):
        mock_post.return_value = cloudinary_response({'result': 'ok'})
        response = self.client.delete(reverse('upload-delete', args=['abc']))
        self.assertEqual(response.status_code, 200)
        args, kwargs = mock_post.call_args
        self.assertEqual(args[0], 'https://api.cloudinary.com/v1_1/demo/image/destroy')
        self.assertEqual(kwargs['data']['public_id'], 'getsetride/cars/abc')

    @patch('uploads.services.cloudinary.requests.post')
    def test_delete_unknown_image(self, mock_post):
        mock_post.return_value = cloudinary_response({'result': 'not found'})
        response = self.client.delete(reverse('upload-delete', args=['getsetride/cars/missing']))
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data['message'], 'Image not found')
