"""
Email composition — HTML and plain-text bodies for the launch emails.
"""
from html import escape
from typing import List, Optional

from invoicebolt.config import Settings
from invoicebolt.services.mailer import EmailAttachment, OutgoingEmail

INDIGO = "#4f46e5"
GREEN = "#22c55e"
MUTED = "#6b7280"
BORDER = "#e5e7eb"


def preheader(text: str) -> str:
    return (
        '<span style="display:none!important;visibility:hidden;opacity:0;color:transparent;'
        f'height:0;width:0;overflow:hidden">{escape(text)}</span>'
    )


def shell(settings: Settings, title: str, body_html: str) -> str:
    """Shared branded wrapper around every email body."""
    return f"""<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width" />
  <title>{escape(title)}</title>
</head>
<body style="margin:0;background:#f6f7fb;font-family:system-ui,-apple-system,Segoe UI,Roboto,Helvetica,Arial,sans-serif;color:#111827">
  <table role="presentation" cellspacing="0" cellpadding="0" border="0" style="max-width:600px;margin:0 auto;background:#ffffff">
    <tr><td style="padding:24px">
      <div>
        <span aria-hidden="true" style="display:inline-block;height:28px;width:28px;border-radius:8px;background:linear-gradient(135deg,{INDIGO},#7c3aed);text-align:center;line-height:28px;color:#fff;font-weight:700">⚡</span>
        <span style="font-weight:700;margin-left:8px">InvoiceBolt</span>
      </div>
      {body_html}
      <div style="height:1px;background:{BORDER};margin:24px 0"></div>
      <p style="font-size:12px;color:{MUTED}">© InvoiceBolt · <a href="{escape(settings.APP_ORIGIN)}" style="color:{INDIGO}">{escape(settings.APP_ORIGIN)}</a><br/>
      Not tax advice · 7-day refund policy</p>
    </td></tr>
  </table>
</body>
</html>"""


def button(href: str, label: str, color: str = INDIGO) -> str:
    return (
        f'<a href="{escape(href)}" aria-label="{escape(label)}" style="display:inline-block;background:{color};'
        f'color:#ffffff;text-decoration:none;padding:12px 18px;border-radius:10px;font-weight:600">{escape(label)}</a>'
    )


def _common_headers(settings: Settings) -> dict:
    return {"List-Unsubscribe": f"<mailto:{settings.UNSUBSCRIBE_EMAIL}?subject=unsubscribe>"}


def _contact_line(settings: Settings) -> str:
    return f"Or reply to this email · {escape(settings.REPLY_TO)} · WhatsApp: {escape(settings.WHATSAPP_DISPLAY)}"


# ========================================
# 1. PAYMENT CONFIRMED
# ========================================
def payment_confirmed_email(
    settings: Settings,
    to: str,
    first_name: Optional[str],
    order_id: str,
    amount: str,
    payment_method: str,
    paid_at: str,
) -> OutgoingEmail:
    name = first_name or "there"
    subject = "Payment confirmed — your spot is reserved"

    rows = [("Order", order_id), ("Amount", amount), ("Method", payment_method), ("Paid at", paid_at)]
    table = "".join(
        f'<tr><td style="padding:8px 0;border-bottom:1px solid {BORDER}">{label}</td>'
        f'<td style="text-align:right;border-bottom:1px solid {BORDER}">{escape(value)}</td></tr>'
        for label, value in rows
        if value
    )

    body = f"""
      <h1 style="margin:16px 0 8px;font-size:22px">Thanks, {escape(name)}! Your payment is confirmed</h1>
      <p style="margin:0 0 16px;color:{MUTED}">We've reserved your lifetime access. When the app is live, we'll email setup instructions and your dashboard link.</p>
      <table role="presentation" style="width:100%;border-collapse:collapse">{table}</table>
      <div style="height:1px;background:{BORDER};margin:24px 0"></div>
      <p style="margin:0 0 10px">{button(settings.WHATSAPP_LINK, "Chat on WhatsApp", GREEN)}</p>
      <p style="color:{MUTED}">{_contact_line(settings)}</p>
    """
    html = preheader(f"Thanks {name}, your payment is confirmed.") + shell(settings, subject, body)
    text = (
        f"Thanks {name}! Your payment is confirmed.\n"
        f"Order: {order_id}\nAmount: {amount}\nMethod: {payment_method}\nPaid at: {paid_at}\n\n"
        f"We'll share access details when the app is live.\n"
        f"WhatsApp: {settings.WHATSAPP_DISPLAY} {settings.WHATSAPP_LINK}"
    )
    return OutgoingEmail(
        to=to, subject=subject, html=html, text=text,
        reply_to=settings.REPLY_TO, headers=_common_headers(settings),
    )


# ========================================
# 2. RESERVED (UNPAID LEAD)
# ========================================
def reservation_email(settings: Settings, to: str, first_name: Optional[str]) -> OutgoingEmail:
    name = first_name or "there"
    subject = "You're on the list — we'll notify you when it's live"
    body = f"""
      <h1 style="margin:16px 0 8px;font-size:22px">Thanks, {escape(name)}! Your spot is reserved</h1>
      <p style="margin:0 0 16px;color:{MUTED}">We'll email you as soon as InvoiceBolt is live with your setup guide and early-access details.</p>
      <p style="margin:0 0 16px;color:{MUTED}">If you intended to pay now, you can complete checkout anytime:</p>
      <p style="margin:12px 0 8px">{button(settings.checkout_url, "Go to Checkout")}</p>
      <p style="margin:8px 0 0">{button(settings.WHATSAPP_LINK, "Chat on WhatsApp", GREEN)}</p>
      <div style="height:1px;background:{BORDER};margin:24px 0"></div>
      <p style="color:{MUTED}">Questions? {_contact_line(settings)}. 7-day refund after purchase. Not tax advice.</p>
    """
    html = preheader(f"Thanks {name}, your spot is reserved.") + shell(settings, subject, body)
    text = (
        f"Thanks {name}! Your spot is reserved. We'll notify you when InvoiceBolt is live.\n"
        f"Checkout: {settings.checkout_url}\n"
        f"WhatsApp: {settings.WHATSAPP_DISPLAY} {settings.WHATSAPP_LINK}"
    )
    return OutgoingEmail(
        to=to, subject=subject, html=html, text=text,
        reply_to=settings.REPLY_TO, headers=_common_headers(settings),
    )


# ========================================
# 3. FREE INVOICE TEMPLATE
# ========================================
def template_resource_email(
    settings: Settings,
    to: str,
    first_name: Optional[str],
    attachments: List[EmailAttachment],
) -> OutgoingEmail:
    name = first_name or "there"
    subject = "Your free GST invoice template"
    files = "".join(f"<li>{escape(a.filename)}</li>" for a in attachments)
    body = f"""
      <h1 style="margin:16px 0 8px;font-size:22px">Here's your invoice template, {escape(name)}</h1>
      <p style="margin:0 0 16px;color:{MUTED}">Attached is a GST-ready sample invoice you can adapt today. Open the HTML file in a browser and print to PDF, or import the CSV into a spreadsheet.</p>
      <ul style="color:{MUTED}">{files}</ul>
      <p style="margin:0 0 16px;color:{MUTED}">InvoiceBolt will do all of this for you in under a minute, with UPI QR codes and WhatsApp sharing built in.</p>
      <p style="margin:12px 0 8px">{button(settings.checkout_url, f"Reserve lifetime access for {settings.price_label}")}</p>
      <div style="height:1px;background:{BORDER};margin:24px 0"></div>
      <p style="color:{MUTED}">{_contact_line(settings)}</p>
    """
    html = preheader("Your GST invoice template is attached.") + shell(settings, subject, body)
    text = (
        f"Hi {name}, your GST invoice template is attached "
        f"({', '.join(a.filename for a in attachments)}).\n"
        f"Reserve lifetime access for {settings.price_label}: {settings.checkout_url}"
    )
    return OutgoingEmail(
        to=to, subject=subject, html=html, text=text, attachments=list(attachments),
        reply_to=settings.REPLY_TO, headers=_common_headers(settings),
    )
