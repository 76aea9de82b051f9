"""Signed calls against the Cloudinary image upload REST API."""

import hashlib
import logging
import time

import requests
from django.conf import settings

from getsetride_backend.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)

ALLOWED_FORMATS = 'jpg,jpeg,png,webp'
# crop to fit within 1200x800, automatic quality
TRANSFORMATION = 'c_limit,h_800,q_auto,w_1200'


def sign_params(params, api_secret):
    """
    Cloudinary request signature.

    Parameters are sorted by name, joined as ``key=value`` pairs with ``&``,
    suffixed with the API secret and SHA-1 hashed. Empty values are skipped.
    """
    to_sign = '&'.join(f"{key}={value}" for key, value in sorted(params.items()) if value not in (None, ''))
    return hashlib.sha1(f"{to_sign}{api_secret}".encode('utf-8')).hexdigest()


def _endpoint(action):
    return f"{settings.CLOUDINARY_BASE_URL}/{settings.CLOUDINARY_CLOUD_NAME}/image/{action}"


def _signed(params):
    params = dict(params, timestamp=int(time.time()))
    params['signature'] = sign_params(params, settings.CLOUDINARY_API_SECRET)
    params['api_key'] = settings.CLOUDINARY_API_KEY
    return params


def full_public_id(public_id):
    """Bare ids are resolved inside the configured upload folder."""
    if '/' in public_id:
        return public_id
    return f"{settings.CLOUDINARY_FOLDER}/{public_id}"


def upload_image(image):
    params = _signed({
        'folder': settings.CLOUDINARY_FOLDER,
        'allowed_formats': ALLOWED_FORMATS,
        'transformation': TRANSFORMATION,
    })
    try:
        response = requests.post(
            _endpoint('upload'),
            data=params,
            files={'file': (image.name, image, image.content_type)},
            timeout=settings.EXTERNAL_API_TIMEOUT,
        )
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        logger.error("Error uploading %s to Cloudinary: %s", image.name, e)
        if getattr(e, 'response', None) is not None:
            logger.error("Cloudinary error response: %s", e.response.text)
        raise ExternalServiceError('Failed to upload image') from e

    body = response.json()
    logger.info("Uploaded %s as %s", image.name, body['public_id'])
    return {'url': body['secure_url'], 'publicId': body['public_id']}


def delete_image(public_id):
    """Destroy an uploaded image. Returns False when Cloudinary does not know it."""
    public_id = full_public_id(public_id)
    try:
        response = requests.post(
            _endpoint('destroy'),
            data=_signed({'public_id': public_id}),
            timeout=settings.EXTERNAL_API_TIMEOUT,
        )
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        logger.error("Error deleting %s from Cloudinary: %s", public_id, e)
        raise ExternalServiceError('Failed to delete image') from e

    result = response.json().get('result')
    logger.info("Cloudinary destroy %s: %s", public_id, result)
    return result == 'ok'
