"""
Command line entry point.

Usage
-----
# Write .rabbitmq.json for provisioning
rabbit-mailer manifest --app-name my_app

# Publish a single email to the queue
rabbit-mailer send --to user@example.com --subject "Welcome!" \\
    --body "Hi" --type welcome --link https://example.com/verify/123

Connection settings come from RABBITMQ_HOST, RABBITMQ_MANAGEMENT_PORT,
RABBITMQ_USERNAME and RABBITMQ_PASSWORD (a .env file is honoured).
"""

import argparse
import sys
from dataclasses import replace

from rabbit_mailer.manifest import MANIFEST_FILENAME, generate_manifest
from rabbit_mailer.providers.email_adapter import Email
from rabbit_mailer.providers.email_builder import EmailType, add_link, set_email_type
from rabbit_mailer.providers.email_service import create_email_service


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='rabbit-mailer',
        description='Publish emails to RabbitMQ via the HTTP Management API.'
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    manifest = subparsers.add_parser('manifest', help='Generate the RabbitMQ provisioning manifest')
    manifest.add_argument('--app-name', help='Broker username (default: APP_NAME or directory name)')
    manifest.add_argument('--output', default=MANIFEST_FILENAME, help='Output path')

    send = subparsers.add_parser('send', help='Publish a single email')
    send.add_argument('--to', required=True, help='Recipient address')
    send.add_argument('--subject', required=True)
    send.add_argument('--body', default='', help='Plain text body')
    send.add_argument('--html-body')
    send.add_argument('--from', dest='from_email', help='Sender address')
    send.add_argument('--type', dest='email_type', choices=[t.value for t in EmailType])
    send.add_argument('--link', help='Verification / reset link')
    send.add_argument('--queue', help='Routing key (default: emails)')
    send.add_argument('--service-name', help='Service name recorded in metadata')

    return parser


def _email_from_args(args) -> Email:
    email = Email(
        to=[args.to],
        from_email=args.from_email,
        subject=args.subject,
        text_body=args.body,
        html_body=args.html_body
    )
    if args.email_type:
        email = set_email_type(email, args.email_type)
    if args.link:
        email = add_link(email, args.link)
    return email


def _run_send(args) -> int:
    config = {}
    if args.queue:
        config['queue'] = args.queue
    if args.service_name:
        config['service_name'] = args.service_name

    service = create_email_service(config)
    response = service.send_email(_email_from_args(args), config)

    if response.success:
        print(f'Published email: {response.message_id}')
        return 0

    print(f'Failed ({response.error_kind.value}): {response.error}', file=sys.stderr)
    return 1


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    if args.command == 'manifest':
        path = generate_manifest(args.app_name, args.output)
        print(f'Generated {path}')
        return 0

    return _run_send(args)


if __name__ == '__main__':
    sys.exit(main())
