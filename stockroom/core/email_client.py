# stockroom/core/email_client.py
from __future__ import annotations

"""
SMTP email client for Stockroom.

Used by the low-stock notifier to alert staff. Configuration is read from
environment variables once at import time:

    SMTP_HOST=smtp.gmail.com
    SMTP_PORT=465
    SMTP_USERNAME=inventory@example.com
    SMTP_PASSWORD=<app password>
    SMTP_FROM_EMAIL=inventory@example.com
    SMTP_FROM_NAME=Stockroom Inventory
    SMTP_USE_TLS=false
    SMTP_USE_SSL=true
"""

import os
import smtplib
from email.message import EmailMessage
from typing import Sequence


def _get_bool_env(name: str, default: bool = False) -> bool:
    """
    Read a boolean env var. Truthy values: "1", "true", "yes", "y".
    """
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y"}


# ---------------------------------------------------------------------------
# Configuration: read once at import time
# ---------------------------------------------------------------------------

SMTP_HOST: str | None = os.getenv("SMTP_HOST")
SMTP_PORT: int = int(os.getenv("SMTP_PORT", "587"))

SMTP_USERNAME: str | None = os.getenv("SMTP_USERNAME")
SMTP_PASSWORD: str | None = os.getenv("SMTP_PASSWORD")

SMTP_FROM_EMAIL: str = os.getenv("SMTP_FROM_EMAIL", SMTP_USERNAME or "")
SMTP_FROM_NAME: str = os.getenv("SMTP_FROM_NAME", "Stockroom Inventory")

SMTP_USE_TLS: bool = _get_bool_env("SMTP_USE_TLS", default=True)
SMTP_USE_SSL: bool = _get_bool_env("SMTP_USE_SSL", default=False)


def is_configured() -> bool:
    return bool(SMTP_HOST and SMTP_USERNAME and SMTP_PASSWORD)


def _create_smtp_client() -> smtplib.SMTP:
    """
    SSL (typically port 465) if SMTP_USE_SSL, otherwise plain SMTP upgraded
    with STARTTLS when SMTP_USE_TLS (typically port 587).
    """
    if not SMTP_HOST:
        raise RuntimeError("SMTP_HOST is not configured. Please set it in .env.")

    if SMTP_USE_SSL:
        server: smtplib.SMTP = smtplib.SMTP_SSL(SMTP_HOST, SMTP_PORT, timeout=30)
    else:
        server = smtplib.SMTP(SMTP_HOST, SMTP_PORT, timeout=30)
        if SMTP_USE_TLS:
            server.starttls()

    return server


def send_email(
    to_emails: str | Sequence[str],
    subject: str,
    text_body: str,
    html_body: str | None = None,
) -> None:
    """
    Send one email to one or more recipients.

    Parameters
    ----------
    to_emails:
        A single address or a list of addresses (all placed in "To").
    subject:
        Email subject line.
    text_body:
        Plain-text body.
    html_body:
        Optional HTML alternative.

    Raises
    ------
    RuntimeError:
        If SMTP is not configured or there are no recipients.
    smtplib.SMTPException:
        If the underlying SMTP connection or send fails.
    """
    if not is_configured():
        raise RuntimeError(
            "SMTP is not configured correctly. "
            "Please set SMTP_HOST, SMTP_USERNAME, and SMTP_PASSWORD in .env."
        )

    recipients = [to_emails] if isinstance(to_emails, str) else list(to_emails)
    if not recipients:
        raise RuntimeError("No recipients given")

    msg = EmailMessage()
    msg["From"] = (
        f"{SMTP_FROM_NAME} <{SMTP_FROM_EMAIL}>"
        if SMTP_FROM_EMAIL
        else SMTP_USERNAME
    )
    msg["To"] = ", ".join(recipients)
    msg["Subject"] = subject
    msg.set_content(text_body)

    if html_body:
        msg.add_alternative(html_body, subtype="html")

    server = _create_smtp_client()
    try:
        server.login(SMTP_USERNAME, SMTP_PASSWORD)  # type: ignore[arg-type]
        server.send_message(msg)
    finally:
        try:
            server.quit()
        except (smtplib.SMTPException, OSError):
            # Connection is being torn down anyway.
            pass
