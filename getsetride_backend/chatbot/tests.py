from decimal import Decimal
from unittest.mock import MagicMock, patch

import requests
from django.contrib.auth import get_user_model
from django.test import SimpleTestCase, TestCase, override_settings
from django.urls import reverse
from rest_framework.test import APIClient

from cars.models import Car
from .assistant import HISTORY_LIMIT, SYSTEM_PROMPT, build_messages, extract_action, results_message

User = get_user_model()


def groq_reply(content, status_code=200):
    response = MagicMock()
    response.status_code = status_code
    response.text = content
    response.json.return_value = {'choices': [{'message': {'role': 'assistant', 'content': content}}]}
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(response=response)
    return response


class AssistantHelperTests(SimpleTestCase):
    def test_extracts_embedded_action(self):
        reply = 'Sure! {"action": "search_cars", "filters": {"city": "Pune"}} Let me look.'
        self.assertEqual(extract_action(reply), {'action': 'search_cars', 'filters': {'city': 'Pune'}})

    def test_plain_text_has_no_action(self):
        self.assertIsNone(extract_action('Hello! How can I help you today?'))
        self.assertIsNone(extract_action('{"action": broken json}'))

    def test_history_is_trimmed(self):
        history = [{'role': 'user', 'content': str(i)} for i in range(15)]
        messages = build_messages('hi', history)
        self.assertEqual(messages[0], {'role': 'system', 'content': SYSTEM_PROMPT})
        self.assertEqual(len(messages), HISTORY_LIMIT + 2)
        self.assertEqual(messages[1]['content'], '5')
        self.assertEqual(messages[-1], {'role': 'user', 'content': 'hi'})

    def test_results_message(self):
        self.assertIn("couldn't find any cars", results_message(0))
        self.assertEqual(
            results_message(1, 'Pune'), "Great news! I found 1 car for you in Pune. Here's what's available:"
        )
        self.assertEqual(results_message(3), "Great news! I found 3 cars for you. Here's what's available:")


@override_settings(GROQ_API_KEY='gsk_test', GROQ_API_URL='https://groq.test/chat', GROQ_MODEL='test-model')
class ChatbotApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.host = User.objects.create_user(email='host@example.com', password='secret123', full_name='Host')
        self.user = User.objects.create_user(email='user@example.com', password='secret123', full_name='User')
        base = {
            'host': self.host, 'brand': 'Toyota', 'model': 'Camry', 'year': 2023, 'category': 'Sedan',
            'transmission': 'Automatic', 'fuel_type': 'Petrol', 'seats': 5,
        }
        self.pune_suv = Car.objects.create(**dict(
            base, brand='Mahindra', model='Thar', category='SUV', city='Pune',
            price_per_day=Decimal('3500'), license_plate='MH12EF9012', rating_average=4.9, rating_count=2,
        ))
        self.pune_sedan = Car.objects.create(**dict(
            base, city='Pune', price_per_day=Decimal('2500'), license_plate='MH01AB1234',
        ))
        self.delhi_sedan = Car.objects.create(**dict(
            base, city='Delhi', price_per_day=Decimal('1500'), license_plate='DL01GH3456',
        ))
        self.client.force_authenticate(user=self.user)
        self.url = reverse('chatbot-message')

    def test_requires_authentication(self):
        self.client.force_authenticate(user=None)
        response = self.client.post(self.url, {'message': 'hi'}, format='json')
        self.assertEqual(response.status_code, 401)

    def test_blank_message(self):
        response = self.client.post(self.url, {'message': '   '}, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertIn('Please provide a message', response.data['message'])

    @patch('chatbot.services.groq.requests.post')
    def test_text_reply(self, mock_post):
        mock_post.return_value = groq_reply('Hello! I can help you find a car.')
        history = [{'role': 'user', 'content': 'hey'}, {'role': 'assistant', 'content': 'hi there'}]

        response = self.client.post(self.url, {'message': 'What can you do?', 'conversationHistory': history}, format='json')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['type'], 'text')
        self.assertEqual(response.data['message'], 'Hello! I can help you find a car.')
        self.assertIsNone(response.data['cars'])

        args, kwargs = mock_post.call_args
        self.assertEqual(args[0], 'https://groq.test/chat')
        self.assertEqual(kwargs['headers']['Authorization'], 'Bearer gsk_test')
        payload = kwargs['json']
        self.assertEqual(payload['model'], 'test-model')
        self.assertEqual(payload['temperature'], 0.7)
        self.assertEqual(payload['max_tokens'], 1024)
        self.assertEqual([m['role'] for m in payload['messages']], ['system', 'user', 'assistant', 'user'])

    @patch('chatbot.services.groq.requests.post')
    def test_search_action_returns_cars(self, mock_post):
        mock_post.return_value = groq_reply('{"action": "search_cars", "filters": {"city": "pune", "maxPrice": 4000}}')

        response = self.client.post(self.url, {'message': 'Cars in Pune under 4000?'}, format='json')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['type'], 'cars')
        self.assertEqual(response.data['filters'], {'city': 'pune', 'maxPrice': 4000})
        self.assertEqual([car['id'] for car in response.data['cars']], [self.pune_suv.id, self.pune_sedan.id])
        self.assertEqual(response.data['message'], "Great news! I found 2 cars for you in pune. Here's what's available:")

    @patch('chatbot.services.groq.requests.post')
    def test_search_ignores_inactive_and_bad_filters(self, mock_post):
        self.pune_suv.is_active = False
        self.pune_suv.save()
        mock_post.return_value = groq_reply(
            '{"action": "search_cars", "filters": {"city": "Pune", "minPrice": "cheap"}}'
        )

        response = self.client.post(self.url, {'message': 'cheap cars in Pune'}, format='json')

        self.assertEqual([car['id'] for car in response.data['cars']], [self.pune_sedan.id])

    @patch('chatbot.services.groq.requests.post')
    def test_search_without_results(self, mock_post):
        mock_post.return_value = groq_reply('{"action": "search_cars", "filters": {"category": "Luxury"}}')
        response = self.client.post(self.url, {'message': 'luxury please'}, format='json')
        self.assertEqual(response.data['cars'], [])
        self.assertIn("couldn't find any cars", response.data['message'])

    @patch('chatbot.services.groq.requests.post')
    def test_bad_api_key(self, mock_post):
        mock_post.return_value = groq_reply('Invalid API Key', status_code=401)
        response = self.client.post(self.url, {'message': 'hi'}, format='json')
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.data['message'], 'AI service configuration error. Please contact support.')

    @patch('chatbot.services.groq.requests.post')
    def test_service_down(self, mock_post):
        mock_post.side_effect = requests.exceptions.ConnectionError('boom')
        response = self.client.post(self.url, {'message': 'hi'}, format='json')
        self.assertEqual(response.status_code, 502)
        self.assertFalse(response.data['success'])

    def test_suggestions_are_public(self):
        self.client.force_authenticate(user=None)
        response = self.client.get(reverse('chatbot-suggestions'))
        self.assertEqual(response.status_code, 200)
        suggestions = response.data['suggestions']
        self.assertEqual(suggestions[0], 'Show me available cars')
        self.assertIn('Cars in Delhi', suggestions)
        self.assertIn('Show me Sedans', suggestions)
        self.assertEqual(len(suggestions), 6)
