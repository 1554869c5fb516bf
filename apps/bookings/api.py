"""
POST /api/bookings — the booking API the wizard submits to.

  200  {"success": true, "message": "...", "bookingId": "BK-..."}
  400  {"error": "Missing required fields"}
  400  {"error": "Invalid booking data", "errors": [...]}
  405  any method but POST
  500  {"error": "Failed to process booking"}

CSRF-exempt: it is a JSON endpoint called server-to-server by the wizard.
"""
import json
import logging

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from .exceptions import InvalidInputError
from .gateway import MISSING_REQUIRED_FIELDS, submit_booking

logger = logging.getLogger(__name__)


@csrf_exempt
@require_POST
def create_booking(request):
    try:
        payload = json.loads(request.body or b'{}')
    except (ValueError, UnicodeDecodeError):
        return JsonResponse({'error': MISSING_REQUIRED_FIELDS}, status=400)
    if not isinstance(payload, dict):
        return JsonResponse({'error': MISSING_REQUIRED_FIELDS}, status=400)

    try:
        receipt = submit_booking(payload)
    except InvalidInputError as exc:
        body = {'error': str(exc)}
        if exc.errors:
            body['errors'] = exc.errors
        return JsonResponse(body, status=400)
    except Exception:
        logger.exception('Booking error')
        return JsonResponse({'error': 'Failed to process booking'}, status=500)

    return JsonResponse({
        'success': True,
        'message': 'Booking confirmed and notifications sent',
        'bookingId': receipt.booking_id,
    })
