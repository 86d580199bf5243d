"""
HTML bodies for transactional emails.
"""
from html import escape
from typing import Optional

_LAYOUT = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width,initial-scale=1" />
  </head>
  <body style="margin:0;background:#f5f5f5;font-family:Arial,Helvetica,sans-serif;color:#111;">
    <div style="max-width:640px;margin:0 auto;padding:24px;">
      <div style="background:#ffffff;border-radius:18px;padding:28px;border:1px solid #e5e7eb;">
        <div style="font-size:18px;font-weight:700;color:#059669;">bayut</div>
        {body}
        <p style="margin:18px 0 0 0;font-size:12px;color:#6b7280;">Thanks,<br/>Bayut Team</p>
      </div>
      <div style="text-align:center;margin-top:14px;font-size:11px;color:#9ca3af;">
        Please do not reply to this email. Replies are routed to an unmonitored mailbox.
      </div>
    </div>
  </body>
</html>"""

_BUTTON = (
    '<a href="{href}" style="display:inline-block;background:#059669;color:#fff;'
    'text-decoration:none;font-weight:700;border-radius:12px;padding:12px 16px;'
    'font-size:14px;">{label}</a>'
)


def _render(body: str) -> str:
    return _LAYOUT.replace("{body}", body)


def otp_email_html(otp: str, valid_minutes: int) -> str:
    spaced = " ".join(otp)
    return _render(f"""
        <h2 style="margin:18px 0 0 0;font-size:18px;">Hello,</h2>
        <p style="margin:10px 0 0 0;font-size:14px;line-height:20px;color:#374151;">
          A request has been received to access your Bayut account. Please enter the following code to proceed:
        </p>
        <div style="margin:18px 0 0 0;background:#f8fafc;border:1px solid #e5e7eb;border-radius:14px;padding:18px;text-align:center;">
          <div style="letter-spacing:10px;font-size:28px;font-weight:800;color:#111827;">{spaced}</div>
        </div>
        <p style="margin:14px 0 0 0;font-size:12px;color:#6b7280;">This code is valid for {valid_minutes} minutes.</p>
        <p style="margin:14px 0 0 0;font-size:12px;color:#6b7280;">If you did not initiate this request, please ignore this message.</p>""")


def verified_email_html() -> str:
    return _render("""
        <h2 style="margin:18px 0 0 0;font-size:18px;">Verified successfully</h2>
        <p style="margin:10px 0 0 0;font-size:14px;line-height:20px;color:#374151;">
          Your email has been verified successfully. You can now continue browsing properties.
        </p>""")


def reset_password_email_html(reset_url: str, valid_minutes: int) -> str:
    button = _BUTTON.format(href=escape(reset_url, quote=True), label="Reset password")
    return _render(f"""
        <h2 style="margin:18px 0 0 0;font-size:18px;">Reset your password</h2>
        <p style="margin:10px 0 0 0;font-size:14px;line-height:20px;color:#374151;">
          We received a request to reset your Bayut password.
        </p>
        <div style="margin:18px 0 0 0;">{button}</div>
        <p style="margin:14px 0 0 0;font-size:12px;color:#6b7280;">This link is valid for {valid_minutes} minutes.</p>
        <p style="margin:14px 0 0 0;font-size:12px;color:#6b7280;">If you did not request a password reset, you can ignore this email.</p>""")


def property_submitted_email_html(
    title: str,
    type_label: str,
    purpose_label: str,
    price_label: str,
    location_line: str,
    beds: int,
    baths: int,
    area_sqft: int,
    property_url: str,
    reference_no: Optional[str] = None,
) -> str:
    button = _BUTTON.format(href=escape(property_url, quote=True), label="View property")
    return _render(f"""
        <h2 style="margin:18px 0 0 0;font-size:18px;">Property submitted successfully</h2>
        <p style="margin:10px 0 0 0;font-size:14px;line-height:20px;color:#374151;">
          We have received your property submission. Here is a summary:
        </p>
        <div style="margin:18px 0 0 0;background:#f8fafc;border:1px solid #e5e7eb;border-radius:14px;padding:16px;">
          <div style="font-size:14px;font-weight:800;color:#111827;">{escape(title)}</div>
          <div style="margin-top:8px;font-size:12px;color:#374151;">{escape(type_label)} &bull; {purpose_label}</div>
          <div style="margin-top:10px;font-size:18px;font-weight:800;color:#059669;">{escape(price_label)}</div>
          <div style="margin-top:10px;font-size:12px;color:#374151;">{escape(location_line)}</div>
          <div style="margin-top:10px;font-size:12px;color:#374151;">
            Beds: <b>{beds}</b> &nbsp;|&nbsp; Baths: <b>{baths}</b> &nbsp;|&nbsp; Area: <b>{area_sqft:,} sqft</b>
          </div>
          <div style="margin-top:10px;font-size:12px;color:#6b7280;">Reference: <b style="color:#111827;">{escape(reference_no or '-')}</b></div>
        </div>
        <div style="margin:18px 0 0 0;">{button}</div>""")
