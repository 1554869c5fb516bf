"""
HTTP client the wizard uses to hand a finished booking to POST /api/bookings.

Errors are mapped onto the SubmissionError family so the wizard can tell a
timeout from an unreachable server from a rejected booking:

  httpx.TimeoutException      -> SubmissionTimeoutError
  other httpx.TransportError  -> NetworkError
  HTTP 400                    -> InvalidInputError
  any other non-2xx / bad body -> SubmissionRejectedError

No retries: a retried POST could book twice.

With `in_process=True` the POST goes to this site's own ASGI application in
memory, so a single sync worker never has to answer its own request.
"""
import logging
from functools import cache

import httpx
from django.conf import settings
from django.core.asgi import get_asgi_application

from .exceptions import (
    InvalidInputError,
    NetworkError,
    SubmissionRejectedError,
    SubmissionTimeoutError,
)

logger = logging.getLogger(__name__)


@cache
def _site_application():
    return get_asgi_application()


class BookingApiClient:

    def __init__(self, url=None, timeout=None, transport=None, in_process=False):
        self.url = url or settings.BOOKING_API_URL
        self.timeout = timeout if timeout is not None else settings.BOOKING_API_TIMEOUT
        if transport is None and in_process:
            transport = httpx.ASGITransport(app=_site_application())
        self.transport = transport

    async def submit(self, draft, service) -> str:
        """POST the draft and return the booking id issued by the API."""
        if not self.url:
            raise NetworkError('No booking API URL configured')

        payload = draft.to_payload(service)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.url, json=payload)
        except httpx.TimeoutException as exc:
            raise SubmissionTimeoutError(f'Booking API timed out after {self.timeout}s') from exc
        except httpx.TransportError as exc:
            raise NetworkError(f'Booking API unreachable: {exc}') from exc

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if response.status_code == 400:
            raise InvalidInputError(body.get('error') or 'Booking rejected', errors=body.get('errors'))
        if not response.is_success:
            raise SubmissionRejectedError(
                body.get('error') or f'Booking API returned HTTP {response.status_code}',
                status_code=response.status_code,
            )

        booking_id = body.get('bookingId')
        if not body.get('success') or not booking_id:
            raise SubmissionRejectedError('Booking API returned an unexpected response', status_code=response.status_code)

        logger.info('Booking %s created for %s', booking_id, service.id)
        return booking_id
