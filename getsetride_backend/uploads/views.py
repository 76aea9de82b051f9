from rest_framework import permissions
from rest_framework.exceptions import NotFound
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import MultipleImageUploadSerializer, SingleImageUploadSerializer
from .services import cloudinary


class SingleImageUploadView(APIView):
    permission_classes = [permissions.IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request):
        serializer = SingleImageUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        uploaded = cloudinary.upload_image(serializer.validated_data['image'])
        return Response({
            'success': True,
            'message': 'Image uploaded successfully',
            'data': uploaded,
        })


class MultipleImageUploadView(APIView):
    permission_classes = [permissions.IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request):
        serializer = MultipleImageUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        uploaded = [cloudinary.upload_image(image) for image in serializer.validated_data['images']]
        return Response({
            'success': True,
            'message': f'{len(uploaded)} image(s) uploaded successfully',
            'data': uploaded,
        })


class ImageDeleteView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def delete(self, request, public_id):
        if not cloudinary.delete_image(public_id):
            raise NotFound('Image not found')
        return Response({'success': True, 'message': 'Image deleted successfully'})
