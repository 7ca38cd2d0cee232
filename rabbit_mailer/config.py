import os
from pathlib import Path
from typing import Any, Dict, Optional
from dotenv import load_dotenv

# Load environment variables from ENV_FILE if specified, or .env.local, or .env
env_file = os.getenv('ENV_FILE')
if env_file:
    load_dotenv(Path(env_file))
else:
    env_local = Path.cwd() / '.env.local'
    if env_local.exists():
        load_dotenv(env_local)
    else:
        load_dotenv()


def _number_from_env(key: str, fallback: int) -> int:
    """Extract integer from environment variable with fallback."""
    raw = os.getenv(key)
    if raw is None:
        return fallback

    try:
        return int(raw)
    except ValueError:
        return fallback


# Always publish to this vhost; never taken from caller configuration
EMAIL_SERVICE_VHOST = 'email_service'

DEFAULT_HOST = 'localhost'
DEFAULT_MANAGEMENT_PORT = 15672
DEFAULT_QUEUE = 'emails'
DEFAULT_CREDENTIAL = 'guest'
DEFAULT_EMAIL_TYPE = 'transactional'
DEFAULT_FROM = 'no-reply@example.com'
DEFAULT_SERVICE_NAME = 'app'
DEFAULT_SENDER_NAME = 'App'

REQUEST_TIMEOUT_SECONDS = 30


def get_config(config: Optional[Dict[str, Any]], key: str, default: Any) -> Any:
    """
    Read a single value from a caller config mapping.

    Integers and strings are returned untouched (strings are not parsed, so a
    bad port ends up in the URL and fails at the HTTP layer). Anything else
    is coerced to int, falling back to the default when that fails.
    """
    value = (config or {}).get(key)
    if value is None:
        return default
    if isinstance(value, (int, str)):
        return value

    try:
        return int(str(value))
    except (TypeError, ValueError):
        return default


def build_rabbit_config(config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Resolve the broker connection settings for one publish.

    Environment variables are read here rather than at import time so a
    changed environment is picked up on the next send.
    """
    return {
        'host': get_config(config, 'host', os.getenv('RABBITMQ_HOST') or DEFAULT_HOST),
        'port': get_config(
            config,
            'port',
            _number_from_env('RABBITMQ_MANAGEMENT_PORT', DEFAULT_MANAGEMENT_PORT)
        ),
        'vhost': EMAIL_SERVICE_VHOST,
        'queue': get_config(config, 'queue', DEFAULT_QUEUE),
        'username': get_config(
            config, 'username', os.getenv('RABBITMQ_USERNAME') or DEFAULT_CREDENTIAL
        ),
        'password': get_config(
            config, 'password', os.getenv('RABBITMQ_PASSWORD') or DEFAULT_CREDENTIAL
        ),
    }
