import logging

import requests
from django.conf import settings
from rest_framework import status

from getsetride_backend.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)

TEMPERATURE = 0.7
MAX_TOKENS = 1024


class AIConfigurationError(ExternalServiceError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'AI service configuration error. Please contact support.'
    default_code = 'ai_configuration_error'


def chat_completion(messages):
    """Send an OpenAI-style message list to Groq and return the reply text."""
    headers = {
        'Authorization': f"Bearer {settings.GROQ_API_KEY}",
        'Content-Type': 'application/json',
    }
    payload = {
        'model': settings.GROQ_MODEL,
        'messages': messages,
        'temperature': TEMPERATURE,
        'max_tokens': MAX_TOKENS,
    }
    try:
        response = requests.post(
            settings.GROQ_API_URL, json=payload, headers=headers, timeout=settings.EXTERNAL_API_TIMEOUT
        )
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        error_response = getattr(e, 'response', None)
        logger.error("Error calling Groq chat completions: %s", e)
        if error_response is not None:
            logger.error("Groq error response: %s", error_response.text)
            if error_response.status_code == 401:
                raise AIConfigurationError() from e
        raise ExternalServiceError('AI service is currently unavailable') from e

    choices = response.json().get('choices') or [{}]
    return (choices[0].get('message') or {}).get('content') or ''
