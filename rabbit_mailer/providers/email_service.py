"""
Email Service - Factory and Facade

This module provides a simple interface for sending emails without
knowing which adapter is being used. It handles adapter selection
and provides a clean API for the rest of the application.
"""

from typing import Dict, Any, Optional
from rabbit_mailer.providers.email_adapter import EmailAdapter, Email, EmailResponse
from rabbit_mailer.providers.rabbitmq_adapter import RabbitMQAdapter
from rabbit_mailer import logger


class EmailService:
    """
    Email service that manages adapters and provides a unified interface.

    This is the main class that application code should use to send emails.
    """

    # Registry of available adapters
    ADAPTERS = {
        'rabbitmq': RabbitMQAdapter
    }

    def __init__(self, provider: str = 'rabbitmq'):
        """
        Initialize email service with specified provider.

        Args:
            provider: Name of a registered adapter ('rabbitmq', ...)
        """
        self.provider = provider.lower()
        self.adapter = self._get_adapter(self.provider)

    def _get_adapter(self, provider: str) -> EmailAdapter:
        """
        Get the appropriate adapter for the provider.

        Raises:
            ValueError: If provider is not supported
        """
        adapter_class = self.ADAPTERS.get(provider)
        if not adapter_class:
            available = ', '.join(self.ADAPTERS.keys())
            raise ValueError(
                f'Unsupported email provider: {provider}. '
                f'Available providers: {available}'
            )

        return adapter_class()

    def send_email(self, email: Email, config: Optional[Dict[str, Any]] = None) -> EmailResponse:
        """
        Send an email using the configured adapter.

        Args:
            email: Email value, typically produced by one of the email_builder helpers
            config: Adapter configuration

        Returns:
            EmailResponse with send result
        """
        provider_name = self.adapter.get_provider_name()
        logger.info(
            f'Sending email via {provider_name}',
            to=email.to,
            subject=email.subject
        )

        response = self.adapter.send_email(email, config or {})

        if response.success:
            logger.info(
                f'Email sent successfully via {provider_name}',
                message_id=response.message_id,
                to=email.to
            )
        else:
            logger.error(
                f'Email send failed via {provider_name}',
                error=response.error,
                error_kind=response.error_kind,
                to=email.to
            )

        return response

    @classmethod
    def register_adapter(cls, provider: str, adapter_class: type):
        """
        Register a new email adapter at runtime.

        Raises:
            TypeError: If adapter_class does not implement EmailAdapter
        """
        if not isinstance(adapter_class, type) or not issubclass(adapter_class, EmailAdapter):
            raise TypeError(f'{adapter_class} must implement EmailAdapter')

        cls.ADAPTERS[provider.lower()] = adapter_class
        logger.info(f'Registered email adapter: {provider}')


def create_email_service(config: Optional[Dict[str, Any]] = None) -> EmailService:
    """
    Factory function to create EmailService from configuration.

    Example:
        >>> service = create_email_service({'service_name': 'my_app'})
        >>> response = service.send_email(email, {'service_name': 'my_app'})
    """
    provider = (config or {}).get('email_provider') or 'rabbitmq'
    return EmailService(provider=provider)
