"""HTML bodies for account emails. Dates are shown in UK format, Europe/London time."""

from datetime import datetime
from html import escape
from zoneinfo import ZoneInfo

UK_TZ = ZoneInfo("Europe/London")
UK_DATETIME_FORMAT = "%d/%m/%Y %H:%M:%S"

RESET_SUBJECT = "DABS Password Reset Request"
PASSWORD_CHANGED_SUBJECT = "DABS - Your Password Has Been Changed"

_STYLE = (
    "body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; }"
    " .container { max-width: 600px; margin: 0 auto; padding: 20px; }"
    " .button { display: inline-block; padding: 10px 20px; background: #0d6efd;"
    " color: #fff; text-decoration: none; border-radius: 4px; }"
    " .footer { font-size: 12px; color: #777; margin-top: 30px; }"
)


def format_uk(when: datetime) -> str:
    return when.astimezone(UK_TZ).strftime(UK_DATETIME_FORMAT)


def _page(title: str, body: str, when: datetime) -> str:
    return (
        "<html><head>"
        f"<title>{escape(title)}</title><style>{_STYLE}</style>"
        "</head><body><div class=\"container\">"
        f"{body}"
        f"<p class=\"footer\">Sent {format_uk(when)} by the Daily Activity Briefing System.</p>"
        "</div></body></html>"
    )


def password_reset_email(name: str, reset_link: str, ttl_minutes: int, when: datetime) -> str:
    link = escape(reset_link, quote=True)
    body = (
        f"<h2>Password Reset Request</h2>"
        f"<p>Hello {escape(name)},</p>"
        f"<p>We received a request to reset your DABS password. "
        f"Use the link below to choose a new one. The link expires in {ttl_minutes} minutes.</p>"
        f"<p><a class=\"button\" href=\"{link}\">Reset Password</a></p>"
        f"<p>If the button does not work, copy this address into your browser:<br>{link}</p>"
        f"<p>If you did not request a reset you can ignore this email.</p>"
    )
    return _page(RESET_SUBJECT, body, when)


def password_changed_email(name: str, when: datetime) -> str:
    body = (
        f"<h2>Password Changed</h2>"
        f"<p>Hello {escape(name)},</p>"
        f"<p>Your DABS password was changed on {format_uk(when)}.</p>"
        f"<p>If you did not make this change, contact your administrator immediately.</p>"
    )
    return _page(PASSWORD_CHANGED_SUBJECT, body, when)
