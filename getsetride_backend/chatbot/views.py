from rest_framework import permissions
from rest_framework.response import Response
from rest_framework.views import APIView

from cars.serializers import CarSerializer
from . import assistant
from .serializers import ChatMessageSerializer


class ChatMessageView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        serializer = ChatMessageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = assistant.respond(
            serializer.validated_data['message'],
            [dict(entry) for entry in serializer.validated_data['conversationHistory']],
        )
        if result['cars'] is not None:
            result['cars'] = CarSerializer(result['cars'], many=True).data
        return Response({'success': True, **result})


class SuggestionsView(APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        return Response({'success': True, 'suggestions': assistant.suggestions()})
