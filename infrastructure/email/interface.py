"""
Email Service Interface
========================

Abstract base class defining the contract for outgoing email.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional


@dataclass
class EmailMessage:
    """
    An outgoing email.

    Attributes:
        subject: Subject line
        body: Plain text body
        to: Recipient addresses
        from_email: Sender address; DEFAULT_FROM_EMAIL when None
        html_body: Optional HTML alternative
    """

    subject: str
    body: str
    to: List[str]
    from_email: Optional[str] = None
    html_body: Optional[str] = None


class EmailServiceInterface(ABC):
    """
    Abstract interface for email operations.

    Concrete implementations:
        - SMTPEmailService: Django's configured email backend
        - MockEmailService: keeps messages in memory for tests
    """

    @abstractmethod
    def send(self, message: EmailMessage) -> bool:
        """
        Send a single message.

        Returns:
            True if the backend accepted the message

        Raises:
            EmailException: If sending fails
        """
        pass

    def send_bulk(self, messages: List[EmailMessage]) -> int:
        """Send several messages; returns how many were accepted."""
        return sum(1 for message in messages if self.send(message))


class EmailException(Exception):
    """Base exception for email operations."""

    pass
