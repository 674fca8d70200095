from __future__ import annotations

import mimetypes
from dataclasses import dataclass, field
from email.message import EmailMessage
from pathlib import Path
from typing import List, Optional


@dataclass
class OutgoingEmail:
    to: List[str]
    subject: str
    body: str
    attachments: List[Path] = field(default_factory=list)
    bcc: List[str] = field(default_factory=list)
    reply_to: Optional[str] = None


def guess_content_type(path: Path) -> tuple[str, str]:
    content_type, _ = mimetypes.guess_type(path.name)
    maintype, _, subtype = (content_type or "application/octet-stream").partition("/")
    return maintype, subtype


def build_mime_message(email: OutgoingEmail, sender: str) -> EmailMessage:
    message = EmailMessage()
    message["Subject"] = email.subject
    message["From"] = sender
    message["To"] = ", ".join(email.to)
    if email.bcc:
        message["Bcc"] = ", ".join(email.bcc)
    if email.reply_to:
        message["Reply-To"] = email.reply_to
    message.set_content(email.body)

    for attachment in email.attachments:
        maintype, subtype = guess_content_type(attachment)
        with attachment.open("rb") as f:
            data = f.read()
        message.add_attachment(data, maintype=maintype, subtype=subtype, filename=attachment.name)
    return message
