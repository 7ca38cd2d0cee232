"""Failure kinds reported in EmailResponse.error_kind."""

from enum import Enum


class ErrorKind(str, Enum):
    # Category-required field missing; raised before any network call
    VALIDATION = 'validation'
    # Broker accepted the publish but no queue is bound to the routing key
    NOT_ROUTED = 'not_routed'
    # Broker answered with a non-200 status
    REMOTE = 'remote'
    # No response at all (DNS, refused connection, timeout)
    TRANSPORT = 'transport'
