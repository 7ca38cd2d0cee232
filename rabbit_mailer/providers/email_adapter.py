"""
Email Adapter Pattern - Interface and Value Types

This module defines the email value passed through the library and the
contract (interface) that every delivery adapter must implement.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Optional, Dict, Any, List, Tuple, Union

from rabbit_mailer.errors import ErrorKind

# A bare address or a (display name, address) pair
Address = Union[str, Tuple[str, str]]


@dataclass(frozen=True)
class Email:
    """
    In-memory email handed to an adapter.

    Treated as immutable: put_header/put_private return a new Email. Header
    names are case-folded into an index once, at construction.
    """
    to: List[Address] = field(default_factory=list)
    from_email: Optional[Address] = None
    subject: Optional[str] = None
    text_body: Optional[str] = None
    html_body: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)
    private: Dict[str, Any] = field(default_factory=dict)
    _header_index: Dict[str, str] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self):
        # Own copies, so later caller mutation cannot desync the index
        object.__setattr__(self, 'headers', dict(self.headers or {}))
        object.__setattr__(self, 'private', dict(self.private or {}))
        index = {str(name).lower(): str(value) for name, value in self.headers.items()}
        object.__setattr__(self, '_header_index', index)

    def get_header(self, name: str) -> Optional[str]:
        return self._header_index.get(name.lower())

    def put_header(self, name: str, value: str) -> 'Email':
        headers = dict(self.headers)
        headers[name] = value
        return replace(self, headers=headers)

    def put_private(self, key: str, value: Any) -> 'Email':
        private = dict(self.private)
        private[key] = value
        return replace(self, private=private)


@dataclass
class EmailResponse:
    """Standard response format from email adapters."""
    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    status_code: Optional[int] = None
    raw_response: Optional[Any] = None


class EmailAdapter(ABC):
    """
    Abstract base class (interface) for delivery adapters.

    Any adapter implementation must extend this class
    and implement the send_email method.
    """

    @abstractmethod
    def send_email(self, email: Email, config: Dict[str, Any]) -> EmailResponse:
        """
        Deliver an email.

        Args:
            email: Email value to deliver
            config: Adapter-specific configuration

        Returns:
            EmailResponse object with send result. Implementations report
            failures in the response instead of raising.
        """
        pass

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return the name of this adapter."""
        pass
