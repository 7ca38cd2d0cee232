"""
Publish emails to RabbitMQ queues through the HTTP Management API.

    from rabbit_mailer import create_email_service, welcome_email

    email = welcome_email('user@example.com', 'https://example.com/verify/123')
    service = create_email_service()
    response = service.send_email(email, {'service_name': 'my_app'})
"""

from rabbit_mailer.errors import ErrorKind
from rabbit_mailer.providers.email_adapter import Email, EmailAdapter, EmailResponse
from rabbit_mailer.providers.email_builder import (
    EmailType,
    ValidationResult,
    add_link,
    magic_link_email,
    password_reset_email,
    set_email_type,
    transactional_email,
    validate_email,
    welcome_email,
)
from rabbit_mailer.providers.email_service import EmailService, create_email_service
from rabbit_mailer.providers.rabbitmq_adapter import RabbitMQAdapter, build_message
from rabbit_mailer.manifest import build_manifest, generate_manifest

__version__ = '1.0.0'
