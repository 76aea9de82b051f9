"""
Rental assistant built on top of the LLM client.

The model is instructed to answer car searches with a small JSON action
(``{"action": "search_cars", "filters": {...}}``). When such an action is
found in a reply it is run against the live listings through the same
``CarFilterSet`` the public listing uses, and the matching cars replace the
raw model text. Anything else is passed back to the user as plain text.
"""

import json
import logging
import re

from django.db.models import Count

from cars.filters import CarFilterSet
from cars.models import Car
from .services import groq

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a helpful car rental assistant for GetSetRide. Your job is to help users find available cars and answer questions about the car rental service.

When users ask about cars, you should extract the following information if mentioned:
- City/Location (e.g., Chandigarh, Delhi, Mumbai)
- Car category (Sedan, SUV, Hatchback, Luxury, Sports, Electric)
- Transmission type (Automatic, Manual)
- Fuel type (Petrol, Diesel, Electric, Hybrid)
- Price range (min/max price per day)
- Number of seats needed

IMPORTANT: When the user asks about car availability or searching for cars, you MUST respond with a JSON object in this exact format:
{"action": "search_cars", "filters": {"city": "city_name", "category": "category", "transmission": "type", "fuelType": "type", "minPrice": number, "maxPrice": number, "seats": number}}

Only include filters that the user specifically mentioned. For example:
- "Show me cars in Chandigarh" -> {"action": "search_cars", "filters": {"city": "Chandigarh"}}
- "Any SUVs in Delhi under 3000 per day" -> {"action": "search_cars", "filters": {"city": "Delhi", "category": "SUV", "maxPrice": 3000}}

For general questions or greetings, respond naturally in plain text without JSON.

Available categories: Sedan, SUV, Hatchback, Luxury, Sports, Electric
Available transmissions: Automatic, Manual
Available fuel types: Petrol, Diesel, Electric, Hybrid"""

HISTORY_LIMIT = 10
MAX_RESULTS = 6
SEARCH_FILTERS = ('city', 'category', 'transmission', 'fuelType', 'minPrice', 'maxPrice', 'seats')

ACTION_PATTERN = re.compile(r'\{[\s\S]*"action"[\s\S]*\}')


def build_messages(message, history=None):
    history = list(history or [])[-HISTORY_LIMIT:]
    return [
        {'role': 'system', 'content': SYSTEM_PROMPT},
        *history,
        {'role': 'user', 'content': message},
    ]


def extract_action(reply):
    """Return the JSON action embedded in a model reply, or None for plain text."""
    match = ACTION_PATTERN.search(reply or '')
    if not match:
        return None
    try:
        action = json.loads(match.group(0))
    except ValueError:
        logger.debug("Reply has no parseable action, treating as text")
        return None
    return action if isinstance(action, dict) else None


def search_cars(filters):
    data = {
        key: str(value) for key, value in filters.items()
        if key in SEARCH_FILTERS and value not in (None, '')
    }
    filterset = CarFilterSet(data=data, queryset=Car.objects.filter(is_active=True).select_related('host'))
    if filterset.errors:
        logger.info("Ignoring invalid assistant filters: %s", filterset.errors.as_json())
    return list(filterset.qs.order_by('-rating_average', '-created_at')[:MAX_RESULTS])


def results_message(count, city=None):
    if count == 0:
        return (
            "Sorry, I couldn't find any cars matching your criteria. "
            "Try adjusting your filters or searching in a different location."
        )
    plural = 's' if count > 1 else ''
    location = f" in {city}" if city else ''
    return f"Great news! I found {count} car{plural} for you{location}. Here's what's available:"


def respond(message, history=None):
    """
    Run one assistant turn.

    Returns a dict with ``type`` (``text`` or ``cars``), ``message`` and
    ``cars`` (model instances, or None for text replies); car replies also
    carry the ``filters`` that were applied.
    """
    reply = groq.chat_completion(build_messages(message, history))

    action = extract_action(reply)
    if not action or action.get('action') != 'search_cars':
        return {'type': 'text', 'message': reply, 'cars': None}

    filters = action.get('filters') or {}
    if not isinstance(filters, dict):
        filters = {}
    cars = search_cars(filters)
    return {
        'type': 'cars',
        'message': results_message(len(cars), filters.get('city')),
        'filters': filters,
        'cars': cars,
    }


def suggestions():
    active = Car.objects.filter(is_active=True)
    city = active.order_by('city').values_list('city', flat=True).distinct().first()
    top_category = (
        active.values('category').annotate(total=Count('id')).order_by('-total', 'category').first()
    )
    items = [
        'Show me available cars',
        f"Cars in {city}" if city else None,
        f"Show me {top_category['category']}s" if top_category else None,
        'Cars under ₹2000 per day',
        'Automatic transmission cars',
        'Electric vehicles available',
    ]
    return [item for item in items if item]
