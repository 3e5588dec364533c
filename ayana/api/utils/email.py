# ayana/api/utils/email.py
from flask_mail import Message

from ayana.extensions import mail


def send_email(subject, recipients, body, sender=None):
    """
    Plain-text UTF-8 e-mail. Empty recipients are dropped; with none left
    nothing is sent and None is returned.
    """
    if isinstance(recipients, str):
        recipients = [recipients]

    recipients = [r for r in (recipients or []) if r]
    if not recipients:
        return None

    msg = Message(
        subject=subject or "",
        recipients=recipients,
        body=body or "",
        sender=sender,
    )
    msg.charset = "utf-8"

    mail.send(msg)
    return msg
