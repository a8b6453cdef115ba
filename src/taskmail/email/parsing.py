"""Conversion of parsed mailbox messages into summaries."""

from imap_tools import EmailAddress as IMAPEmailAddress
from imap_tools import MailMessage

from taskmail.email.models import EmailAddress, MessageSummary

_NO_SUBJECT = "(no subject)"


def _convert_address(addr: IMAPEmailAddress | None) -> EmailAddress | None:
    """Convert imap-tools EmailAddress to our EmailAddress model."""
    if addr is None or not addr.email:
        return None
    return EmailAddress(name=addr.name or None, address=addr.email)


def to_summary(msg: MailMessage) -> MessageSummary:
    """Build a MessageSummary from a parsed message (full or headers only)."""
    sender = _convert_address(msg.from_values)
    return MessageSummary(
        subject=msg.subject or _NO_SUBJECT,
        sender=str(sender) if sender else msg.from_,
        date=msg.date,
    )
