"""Shared helpers for outbound HTTP calls made with ``requests``."""

import logging

import requests
from django.conf import settings

from telehealth_backend.core.exceptions import IntegrationError

logger = logging.getLogger(__name__)


def default_timeout():
    return getattr(settings, 'HTTP_TIMEOUT_SECONDS', 15)


def send(service, method, url, *, timeout=None, **kwargs):
    """Perform a request and return the response.

    Transport errors and non-2xx replies raise IntegrationError.
    """
    try:
        resp = requests.request(method, url, timeout=timeout or default_timeout(), **kwargs)
    except requests.exceptions.Timeout as e:
        logger.error('%s request timed out: %s %s', service, method, url)
        raise IntegrationError(service, f'{service} request timed out') from e
    except requests.exceptions.RequestException as e:
        logger.error('%s request failed: %s', service, e)
        raise IntegrationError(service, f'{service} request failed: {e}') from e

    if not resp.ok:
        logger.error('%s returned %s: %s', service, resp.status_code, resp.text[:500])
        raise IntegrationError(service, f'{service} API error: {resp.status_code}')
    return resp


def send_json(service, method, url, **kwargs):
    resp = send(service, method, url, **kwargs)
    try:
        return resp.json()
    except ValueError as e:
        raise IntegrationError(service, f'{service} returned invalid JSON') from e
