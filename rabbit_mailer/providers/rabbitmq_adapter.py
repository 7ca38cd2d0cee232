"""
RabbitMQ Email Adapter Implementation

Publishes emails to a RabbitMQ queue through the HTTP Management API instead
of delivering them directly. A separate email service consumes the queue.

Email type can be specified via (first match wins):
- `X-Email-Type` header
- `email_type` private field (see email_builder)
- `default_type` config option
"""

import base64
import json
import secrets
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from urllib.parse import quote

import requests

from rabbit_mailer import config as settings
from rabbit_mailer import logger
from rabbit_mailer.errors import ErrorKind
from rabbit_mailer.providers.email_adapter import Address, EmailAdapter, Email, EmailResponse
from rabbit_mailer.providers.email_builder import validate_email


def generate_message_id() -> str:
    """16 random bytes as 32 lowercase hex characters."""
    return secrets.token_hex(16)


def determine_email_type(email: Email, config: Dict[str, Any]) -> str:
    # Priority: header > private field > config default
    header_type = email.get_header('X-Email-Type')
    if header_type is not None:
        return header_type

    private_type = email.private.get('email_type')
    if private_type is not None:
        return getattr(private_type, 'value', None) or str(private_type)

    default_type = config.get('default_type')
    return settings.DEFAULT_EMAIL_TYPE if default_type is None else default_type


def format_recipient(to) -> Optional[str]:
    """Only a single recipient is supported; anything else yields None."""
    if not isinstance(to, (list, tuple)) or len(to) != 1:
        return None

    recipient = to[0]
    if isinstance(recipient, tuple) and len(recipient) == 2:
        return recipient[1]
    if isinstance(recipient, str):
        return recipient
    return None


def format_sender(from_email: Optional[Address], config: Dict[str, Any]) -> str:
    if isinstance(from_email, tuple) and len(from_email) == 2:
        return from_email[1]
    if isinstance(from_email, str):
        return from_email
    return config.get('default_from') or settings.DEFAULT_FROM


def basic_auth_header(username, password) -> str:
    """HTTP Basic credentials, UTF-8 encoded so non-latin-1 passwords work."""
    credentials = f'{username}:{password}'.encode('utf-8')
    return f"Basic {base64.b64encode(credentials).decode('ascii')}"


def _non_empty_string(value) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def build_message(email: Email, config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Build the JSON message consumed by the email service.

    Keys with a None value are dropped, so the output never carries nulls.
    """
    config = config or {}
    service_name = config.get('service_name')

    message = {
        'type': determine_email_type(email, config),
        'to': format_recipient(email.to),
        'subject': email.subject,
        'body': email.text_body or '',
        'html_body': email.html_body,
        'from': format_sender(email.from_email, config),
        'from_name': config.get('sender_name') or service_name or settings.DEFAULT_SENDER_NAME,
        'message_id': generate_message_id(),
        'link': _non_empty_string(email.private.get('link')),
        'metadata': {
            'service': service_name or settings.DEFAULT_SERVICE_NAME,
            'created_at': datetime.now(timezone.utc).isoformat()
        }
    }

    return {key: value for key, value in message.items() if value is not None}


class RabbitMQAdapter(EmailAdapter):
    """RabbitMQ Management API implementation of the EmailAdapter interface."""

    PUBLISH_PATH = '/api/exchanges/{vhost}/amq.default/publish'

    def get_provider_name(self) -> str:
        return "RabbitMQ"

    def send_email(self, email: Email, config: Dict[str, Any]) -> EmailResponse:
        """
        Validate, build and publish an email.

        Args:
            email: Email value to publish
            config: Optional keys host, port, queue, username, password,
                service_name, default_type, default_from, sender_name

        Returns:
            EmailResponse with send result
        """
        config = config or {}

        validation = validate_email(email)
        if not validation.valid:
            logger.warn('Email failed validation', error=validation.error)
            return EmailResponse(
                success=False,
                error=validation.error,
                error_kind=validation.error_kind
            )

        rabbit_config = settings.build_rabbit_config(config)
        message = build_message(email, config)

        return self.publish_message(message, rabbit_config)

    def publish_message(self, message: Dict[str, Any], rabbit_config: Dict[str, Any]) -> EmailResponse:
        """
        Publish one message to the default exchange of the configured vhost.

        Returns:
            EmailResponse; on success message_id is the message's own id
        """
        message_id = message.get('message_id')
        url = (
            f"http://{rabbit_config['host']}:{rabbit_config['port']}"
            + self.PUBLISH_PATH.format(vhost=quote(rabbit_config['vhost'], safe=''))
        )

        # Body format expected by the Management API publish endpoint
        payload = {
            'properties': {},
            'routing_key': rabbit_config['queue'],
            'payload': json.dumps(message),
            'payload_encoding': 'string'
        }

        headers = {
            'Authorization': basic_auth_header(rabbit_config['username'], rabbit_config['password']),
            'Content-Type': 'application/json'
        }

        logger.debug(
            f"Publishing email message to RabbitMQ queue {rabbit_config['queue']}",
            message_id=message_id
        )

        try:
            response = requests.post(
                url,
                json=payload,
                headers=headers,
                timeout=settings.REQUEST_TIMEOUT_SECONDS
            )
        except requests.RequestException as e:
            logger.error(f'HTTP request failed: {str(e)}', err=e)
            return EmailResponse(
                success=False,
                error=f'Request failed: {str(e)}',
                error_kind=ErrorKind.TRANSPORT
            )

        body = self._parse_body(response)

        if response.status_code == 200 and isinstance(body, dict) and body.get('routed') is True:
            logger.debug('Successfully published email message', message_id=message_id)
            return EmailResponse(
                success=True,
                message_id=message_id,
                status_code=response.status_code,
                raw_response=body
            )

        if response.status_code == 200 and isinstance(body, dict) and body.get('routed') is False:
            logger.warn(
                'Message published but not routed (queue may not exist)',
                message_id=message_id,
                queue=rabbit_config['queue']
            )
            return EmailResponse(
                success=False,
                error='Message not routed to queue',
                error_kind=ErrorKind.NOT_ROUTED,
                status_code=response.status_code,
                raw_response=body
            )

        logger.error(f'RabbitMQ publish failed with status {response.status_code}', body=body)
        return EmailResponse(
            success=False,
            error=f'HTTP {response.status_code}: {body!r}',
            error_kind=ErrorKind.REMOTE,
            status_code=response.status_code,
            raw_response=body
        )

    @staticmethod
    def _parse_body(response) -> Any:
        """Decoded JSON body, or the raw text when it is not JSON."""
        if not response.text:
            return {}
        try:
            return response.json()
        except ValueError:
            return response.text
