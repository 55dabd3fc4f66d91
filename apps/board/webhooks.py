# apps/board/webhooks.py

"""
Outbound webhooks

Delivery is fire-and-forget on a small worker pool: failures are logged
and never reach the request that triggered them. Bursts queue up behind
the pool instead of starting a thread per event.
"""

import hashlib
import hmac
import json
import logging
from concurrent.futures import ThreadPoolExecutor

import httpx
from django.core.serializers.json import DjangoJSONEncoder
from django.utils import timezone

logger = logging.getLogger(__name__)

WEBHOOK_EVENTS = (
    'card.created',
    'card.updated',
    'card.deleted',
    'card.moved',
    'card.archived',
    'card.unarchived',
)


def sign_payload(secret, body):
    """Hex HMAC-SHA256 of the raw request body"""
    return hmac.new(secret.encode('utf-8'), body, hashlib.sha256).hexdigest()


class WebhookDispatcher:
    """Dispatcher used when no webhook endpoint is configured"""

    def dispatch(self, user_id, event, data):
        return None


class SignedWebhookDispatcher(WebhookDispatcher):
    """
    POSTs {event, timestamp, data} to a single configured URL

    Only events listed in `events` are sent. When a secret is set the
    body is signed in the X-Kanban-Signature header.
    """

    def __init__(self, url, secret=None, events=WEBHOOK_EVENTS, timeout=10.0, max_workers=4):
        self.url = url
        self.secret = secret
        self.events = frozenset(events)
        self.timeout = timeout
        self.executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix='webhook')

    def build_request(self, event, data):
        body = json.dumps({
            'event': event,
            'timestamp': timezone.now().isoformat(),
            'data': data,
        }, cls=DjangoJSONEncoder).encode('utf-8')

        headers = {
            'Content-Type': 'application/json',
            'X-Kanban-Event': event,
        }
        if self.secret:
            headers['X-Kanban-Signature'] = f"sha256={sign_payload(self.secret, body)}"

        return body, headers

    def dispatch(self, user_id, event, data):
        if event not in self.events:
            return None

        body, headers = self.build_request(event, data)
        return self.executor.submit(self.deliver, event, body, headers)

    def deliver(self, event, body, headers):
        try:
            response = httpx.post(self.url, content=body, headers=headers, timeout=self.timeout)
        except httpx.HTTPError as e:
            logger.error(f"❌ Webhook {event} to {self.url} failed: {e}")
            return None

        if response.is_error:
            logger.error(f"❌ Webhook {event} rejected: {response.status_code} {response.reason_phrase}")
        else:
            logger.info(f"🪝 Webhook {event} delivered ({response.status_code})")
        return response


def build_dispatcher(settings):
    """Picks the dispatcher from KANBAN_WEBHOOK_* settings"""
    url = getattr(settings, 'KANBAN_WEBHOOK_URL', '')
    if not url:
        return WebhookDispatcher()

    return SignedWebhookDispatcher(
        url=url,
        secret=getattr(settings, 'KANBAN_WEBHOOK_SECRET', '') or None,
        events=getattr(settings, 'KANBAN_WEBHOOK_EVENTS', None) or WEBHOOK_EVENTS,
        timeout=getattr(settings, 'KANBAN_WEBHOOK_TIMEOUT', 10.0),
        max_workers=getattr(settings, 'KANBAN_WEBHOOK_WORKERS', 4),
    )
