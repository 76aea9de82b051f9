from django.urls import path

from .views import ChatMessageView, SuggestionsView

urlpatterns = [
    path('chatbot/message', ChatMessageView.as_view(), name='chatbot-message'),
    path('chatbot/suggestions', SuggestionsView.as_view(), name='chatbot-suggestions'),
]
