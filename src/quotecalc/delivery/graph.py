"""Send mail through the Microsoft Graph ``sendMail`` endpoint."""
from __future__ import annotations

import base64
import json
import logging
from urllib.parse import quote
from urllib.request import Request, urlopen

from .config import GraphConfig
from .message import OutgoingEmail, guess_content_type

LOGGER = logging.getLogger(__name__)


class GraphSendError(RuntimeError):
    """Raised when Graph answers with anything other than 202 Accepted."""


def _recipients(addresses) -> list:
    return [{"emailAddress": {"address": address}} for address in addresses]


def build_graph_payload(email: OutgoingEmail, save_to_sent_items: bool = True) -> dict:
    message: dict = {
        "subject": email.subject,
        "body": {"contentType": "Text", "content": email.body},
        "toRecipients": _recipients(email.to),
    }
    if email.bcc:
        message["bccRecipients"] = _recipients(email.bcc)
    if email.reply_to:
        message["replyTo"] = _recipients([email.reply_to])
    if email.attachments:
        attachments = []
        for path in email.attachments:
            maintype, subtype = guess_content_type(path)
            attachments.append(
                {
                    "@odata.type": "#microsoft.graph.fileAttachment",
                    "name": path.name,
                    "contentType": f"{maintype}/{subtype}",
                    "contentBytes": base64.b64encode(path.read_bytes()).decode("ascii"),
                }
            )
        message["attachments"] = attachments
    return {"message": message, "saveToSentItems": save_to_sent_items}


class GraphSender:
    name = "graph"

    def __init__(self, config: GraphConfig, default_sender: str) -> None:
        self.config = config
        self.sender = config.sender or default_sender

    def send(self, email: OutgoingEmail, timeout: float) -> None:
        url = f"{self.config.endpoint.rstrip('/')}/users/{quote(self.sender)}/sendMail"
        body = json.dumps(build_graph_payload(email, self.config.save_to_sent_items)).encode("utf-8")
        request = Request(
            url,
            data=body,
            method="POST",
            headers={
                "Authorization": f"Bearer {self.config.access_token}",
                "Content-Type": "application/json",
            },
        )
        LOGGER.debug("POST %s (%d bytes)", url, len(body))
        with urlopen(request, timeout=timeout) as response:
            status = getattr(response, "status", None) or response.getcode()
        if status != 202:
            raise GraphSendError(f"Graph sendMail returned HTTP {status}")


__all__ = ["GraphSendError", "GraphSender", "build_graph_payload"]
