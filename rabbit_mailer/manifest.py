"""
Provisioning manifest for the RabbitMQ resources this library needs.

The manifest grants an application's user write access to the emails queue
on the shared email_service vhost. It is generated on demand and is not
part of the send path.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

from rabbit_mailer import config as settings
from rabbit_mailer import logger

MANIFEST_FILENAME = '.rabbitmq.json'


def build_manifest(app_name: str) -> Dict[str, Any]:
    return {
        'rabbitmq': {
            'vhosts': [
                {
                    'name': settings.EMAIL_SERVICE_VHOST,
                    'shared': True,
                    'description': 'Shared vhost for email service communication'
                }
            ],
            'users': [
                {
                    'username': app_name,
                    'vhosts': [
                        {
                            'name': settings.EMAIL_SERVICE_VHOST,
                            'permissions': {
                                'configure': '',
                                'write': settings.DEFAULT_QUEUE,
                                'read': ''
                            }
                        }
                    ]
                }
            ]
        }
    }


def generate_manifest(
    app_name: Optional[str] = None,
    path: Union[str, Path] = MANIFEST_FILENAME
) -> Path:
    """
    Write the manifest to disk and return its path.

    app_name falls back to the APP_NAME environment variable, then to the
    name of the current working directory.
    """
    app_name = app_name or os.getenv('APP_NAME') or Path.cwd().name
    path = Path(path)

    path.write_text(json.dumps(build_manifest(app_name)))

    logger.info(f'Generated {path.name} manifest for {app_name}', path=str(path))
    return path
