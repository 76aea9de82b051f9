from rest_framework import serializers


class HistoryEntrySerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=['user', 'assistant'])
    content = serializers.CharField(allow_blank=True, trim_whitespace=False)


class ChatMessageSerializer(serializers.Serializer):
    message = serializers.CharField(error_messages={
        'required': 'Please provide a message',
        'blank': 'Please provide a message',
        'null': 'Please provide a message',
    })
    conversationHistory = HistoryEntrySerializer(many=True, required=False, default=list)
