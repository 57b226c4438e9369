import smtplib
import logging
from email.message import EmailMessage
from html import escape
from typing import Optional
from app.core.config import settings

logger = logging.getLogger(__name__)


def send_email(to_email: str, subject: str, body: str, html: str | None = None) -> bool:
    if settings.EMAIL_BACKEND == "console":
        logger.info("Email (console backend) to=%s subject=%r\n%s", to_email, subject, body)
        return True

    smtp_host = settings.SMTP_HOST
    smtp_port = settings.SMTP_PORT
    smtp_user = settings.SMTP_USER
    smtp_pass = settings.SMTP_PASSWORD

    if not smtp_user or not smtp_pass:
        raise Exception("SMTP credentials not configured (SMTP_USER / SMTP_PASSWORD)")

    msg = EmailMessage()
    msg["Subject"] = subject
    msg["From"] = f"{settings.SENDER_NAME} <{settings.FROM_EMAIL or smtp_user}>"
    msg["To"] = to_email
    msg.set_content(body)
    if html:
        msg.add_alternative(html, subtype="html")

    try:
        with smtplib.SMTP(smtp_host, smtp_port, timeout=10) as server:
            server.ehlo()
            if smtp_port == 587:
                server.starttls()
                server.ehlo()
            server.login(smtp_user, smtp_pass)
            server.send_message(msg)
        return True
    except Exception:
        logger.exception("Failed to send email")
        raise


def _login_lines(login: dict) -> list[str]:
    return [
        f"Time: {login.get('timestamp', 'unknown')}",
        f"IP address: {login.get('ip_address') or 'Unknown IP'}",
        f"Device: {login.get('device_type', 'Unknown')}",
        f"Browser: {login.get('browser', 'Unknown Browser')}",
    ]


def _html_list(lines: list[str]) -> str:
    return "<ul>" + "".join(f"<li>{escape(line)}</li>" for line in lines) + "</ul>"


def send_login_alert_email(to_email: str, recipient_name: Optional[str], login: dict) -> bool:
    subject = f"New sign-in to your {settings.APP_NAME} account"
    name = recipient_name or "there"
    lines = _login_lines(login)
    body = (
        f"Hi {name},\n\n"
        f"We noticed a new sign-in to your {settings.APP_NAME} account.\n\n"
        + "\n".join(lines)
        + "\n\nIf this was you, no action is needed. If not, review your active sessions:\n"
        f"{settings.APP_URL}/settings\n\n"
        f"— {settings.SENDER_NAME}"
    )
    html = (
        f"<p>Hi {escape(name)},</p>"
        f"<p>We noticed a new sign-in to your {escape(settings.APP_NAME)} account.</p>"
        f"{_html_list(lines)}"
        f"<p>If this wasn't you, <a href=\"{settings.APP_URL}/settings\">review your active sessions</a>.</p>"
        f"<br/><p>— {escape(settings.SENDER_NAME)}</p>"
    )
    return send_email(to_email, subject, body, html)


def send_new_device_alert_email(
    to_email: str,
    recipient_name: Optional[str],
    login: dict,
    previous_login: Optional[dict] = None,
) -> bool:
    """Alert about a login from an unrecognised device.

    When a previous login is known it is included so the user can compare.
    """
    subject = f"New device sign-in to your {settings.APP_NAME} account"
    name = recipient_name or "there"
    lines = _login_lines(login)
    body = (
        f"Hi {name},\n\n"
        f"We detected a login to your {settings.APP_NAME} account from a new device. "
        "This could be you logging in from a different computer, browser, or location.\n\n"
        "New login:\n" + "\n".join(lines)
    )
    html = (
        f"<p>Hi {escape(name)},</p>"
        f"<p>We detected a login to your {escape(settings.APP_NAME)} account from a new device.</p>"
        f"<h3>New login</h3>{_html_list(lines)}"
    )
    if previous_login:
        previous_lines = _login_lines(previous_login)
        body += "\n\nPrevious login:\n" + "\n".join(previous_lines)
        html += f"<h3>Previous login</h3>{_html_list(previous_lines)}"

    body += (
        "\n\nIf this was you, you can safely ignore this email. "
        f"If it wasn't, secure your account now: {settings.APP_URL}/settings\n\n"
        f"— {settings.SENDER_NAME}"
    )
    html += (
        f"<p><strong>If this wasn't you:</strong> <a href=\"{settings.APP_URL}/settings\">"
        "review your account settings</a>.</p>"
        f"<br/><p>— {escape(settings.SENDER_NAME)}</p>"
    )
    return send_email(to_email, subject, body, html)


def send_welcome_email(to_email: str, recipient_name: Optional[str]) -> bool:
    subject = f"Welcome to {settings.APP_NAME}!"
    name = recipient_name or "there"
    body = (
        f"Hi {name},\n\n"
        f"Thanks for joining {settings.APP_NAME}. Your tools are waiting at {settings.APP_URL}/dashboard\n\n"
        f"— {settings.SENDER_NAME}"
    )
    html = (
        f"<p>Hi {escape(name)},</p>"
        f"<p>Thanks for joining {escape(settings.APP_NAME)}. "
        f"<a href=\"{settings.APP_URL}/dashboard\">Open your dashboard</a>.</p>"
        f"<br/><p>— {escape(settings.SENDER_NAME)}</p>"
    )
    return send_email(to_email, subject, body, html)


def send_new_user_notification(user_email: str, user_name: Optional[str], signup_method: Optional[str]) -> bool:
    """Tell the admin inbox about a signup. Skipped when ADMIN_EMAIL is unset."""
    if not settings.ADMIN_EMAIL:
        logger.warning("ADMIN_EMAIL not configured. Skipping new user notification.")
        return False
    subject = f"New User Signup - {settings.APP_NAME}"
    body = (
        f"A new user signed up.\n\n"
        f"Email: {user_email}\n"
        f"Name: {user_name or '-'}\n"
        f"Method: {signup_method or 'unknown'}\n"
    )
    return send_email(settings.ADMIN_EMAIL, subject, body)


def send_support_request_email(
    name: str,
    email: str,
    subject: str,
    message: str,
    priority: str,
    client_ip: str,
) -> bool:
    if not settings.ADMIN_EMAIL:
        raise Exception("ADMIN_EMAIL not configured")
    body = (
        f"From: {name} ({email})\n"
        f"Priority: {priority.upper()}\n"
        f"IP Address: {client_ip}\n\n"
        f"{message}\n"
    )
    html = (
        "<h2>New Support Request</h2>"
        f"<p><strong>From:</strong> {escape(name)} ({escape(email)})<br/>"
        f"<strong>Priority:</strong> {escape(priority.upper())}<br/>"
        f"<strong>IP Address:</strong> {escape(client_ip)}</p>"
        f"<p style=\"white-space: pre-wrap\">{escape(message)}</p>"
    )
    return send_email(settings.ADMIN_EMAIL, f"[Support Request] {subject}", body, html)
