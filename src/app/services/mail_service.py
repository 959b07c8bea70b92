"""Mail Service Interface

Defines the contract for handing invoice e-mails to a mail transport.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class MailAttachment:
    """File attached to an outgoing message"""

    filename: str
    content: bytes
    content_type: str = "application/pdf"


@dataclass(frozen=True)
class MailMessage:
    """Transport-independent outgoing e-mail"""

    recipient: str
    subject: str
    text_body: str
    attachments: List[MailAttachment] = field(default_factory=list)
    # Sent as a text/html alternative to text_body when set
    html_body: Optional[str] = None


class MailService(ABC):
    """
    Abstract mail transport

    Implementations can send through:
    - SMTP relay
    - Log output (development)
    """

    @abstractmethod
    async def send(self, message: MailMessage) -> str:
        """
        Send a message

        Args:
            message: MailMessage to deliver

        Returns:
            Transport message ID

        Raises:
            DeliveryError: the relay could not be reached, rejected the
                credentials or the recipient, or did not answer in time
        """
        pass
