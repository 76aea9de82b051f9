from django.conf import settings
from rest_framework import serializers


def validate_image_file(file):
    content_type = getattr(file, 'content_type', '') or ''
    if not content_type.startswith('image/'):
        raise serializers.ValidationError('Only image files are allowed!')
    if file.size > settings.UPLOAD_MAX_FILE_SIZE:
        limit_mb = settings.UPLOAD_MAX_FILE_SIZE // (1024 * 1024)
        raise serializers.ValidationError(f'File too large. Maximum size is {limit_mb}MB')
    return file


class SingleImageUploadSerializer(serializers.Serializer):
    image = serializers.FileField(
        validators=[validate_image_file],
        error_messages={'required': 'No image file provided'},
    )


class MultipleImageUploadSerializer(serializers.Serializer):
    images = serializers.ListField(
        child=serializers.FileField(validators=[validate_image_file]),
        allow_empty=False,
        error_messages={'required': 'No image files provided', 'empty': 'No image files provided'},
    )

    def validate_images(self, value):
        if len(value) > settings.UPLOAD_MAX_FILES:
            raise serializers.ValidationError(f'You can upload at most {settings.UPLOAD_MAX_FILES} images')
        return value
