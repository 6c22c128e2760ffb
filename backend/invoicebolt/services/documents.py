"""
Document Renderer — sample GST invoice as HTML and CSV attachments.
Pure functions: a data bag in, bytes out.
"""
import csv
import io
from dataclasses import asdict, dataclass
from datetime import date, timedelta
from html import escape
from typing import Optional
from urllib.parse import quote

from invoicebolt.config import Settings


@dataclass(frozen=True)
class InvoicePreviewData:
    invoice_number: str
    business_name: str
    business_gstin: str
    client_name: str
    client_address_line1: str
    client_address_line2: str
    invoice_date: str
    due_date: str
    item_description: str
    amount_inr: str      # e.g. "INR 999"
    qr_url: str          # absolute URL to a UPI QR image


INVOICE_STYLE = """
  :root{--bg:#f7f8fb;--card:#ffffff;--muted:#6b7280;--border:#e5e7eb;--purple:#4f46e5;--text:#0f172a}
  body{margin:0;background:var(--bg);font-family:system-ui,-apple-system,Segoe UI,Roboto,Helvetica,Arial,sans-serif;color:var(--text)}
  .wrap{padding:48px}
  .header{background:#eef2ff;padding:10px 16px;border-bottom:1px solid #e5e7eb;font-weight:700}
  .card{width:700px;margin:28px auto;background:var(--card);border:1px solid var(--border);border-radius:12px;padding:20px}
  .row{display:flex;justify-content:space-between;gap:16px}
  .muted{color:var(--muted)}
  .small{font-size:12px}
  .title{color:var(--purple);font-weight:800}
  .pill-amount{display:inline-block;background:#eef2ff;color:var(--purple);font-weight:800;padding:6px 10px;border-radius:8px}
  .divider{height:1px;background:var(--border);margin:12px 0}
  table{width:100%;border-collapse:collapse}
  th,td{font-size:13px;padding:10px}
  th{background:#f8fafc;text-align:left}
  td{border-top:1px solid var(--border)}
"""


def render_invoice_html(data: InvoicePreviewData) -> bytes:
    """Self-contained HTML document matching the landing page invoice card."""
    e = {k: escape(str(v or "")) for k, v in asdict(data).items()}
    document = f"""<!doctype html>
<html lang="en"><head><meta charset="utf-8"/>
<meta name="viewport" content="width=device-width,initial-scale=1"/>
<title>Invoice {e['invoice_number']}</title>
<style>{INVOICE_STYLE}</style>
</head>
<body>
  <div class="wrap">
    <div class="header">Invoice Preview</div>
    <div class="card">
      <div class="row">
        <div>
          <div class="title">INVOICE</div>
          <div class="muted small">#{e['invoice_number']}</div>
        </div>
        <div style="text-align:right">
          <div style="font-weight:700">{e['business_name']}</div>
          <div class="muted small">GST: {e['business_gstin']}</div>
        </div>
      </div>
      <div class="divider"></div>
      <div class="row">
        <div>
          <div style="font-weight:700;margin-bottom:6px">Bill To:</div>
          <div style="font-weight:600">{e['client_name']}</div>
          <div class="muted small">{e['client_address_line1']}</div>
          <div class="muted small">{e['client_address_line2']}</div>
        </div>
        <div>
          <div style="font-weight:700;margin-bottom:6px">Invoice Date:</div>
          <div class="small">{e['invoice_date']}</div>
          <div style="font-weight:700;margin:10px 0 6px">Due Date:</div>
          <div class="small">{e['due_date']}</div>
        </div>
      </div>
      <div class="divider"></div>
      <table>
        <thead><tr><th>Description</th><th style="text-align:right">Amount</th></tr></thead>
        <tbody><tr><td>{e['item_description']}</td><td style="text-align:right">{e['amount_inr']}</td></tr></tbody>
      </table>
      <div class="row" style="margin-top:16px;align-items:center">
        <div style="text-align:center">
          <img src="{e['qr_url']}" alt="UPI QR" width="140" height="140" style="border:1px solid var(--border);border-radius:8px"/>
          <div class="muted small" style="margin-top:6px">Scan to pay instantly</div>
        </div>
        <div style="text-align:right;flex:1">
          <div class="pill-amount">{e['amount_inr']}</div>
          <div class="muted small" style="margin-top:6px">Total Amount</div>
        </div>
      </div>
    </div>
  </div>
</body></html>"""
    return document.encode("utf-8")


CSV_COLUMNS = [
    ("Invoice Number", "invoice_number"),
    ("Invoice Date", "invoice_date"),
    ("Due Date", "due_date"),
    ("Business", "business_name"),
    ("GSTIN", "business_gstin"),
    ("Client", "client_name"),
    ("Address Line 1", "client_address_line1"),
    ("Address Line 2", "client_address_line2"),
    ("Description", "item_description"),
    ("Amount", "amount_inr"),
]


def render_invoice_csv(data: InvoicePreviewData) -> bytes:
    """One header row and one data row, spreadsheet friendly."""
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow([label for label, _ in CSV_COLUMNS])
    writer.writerow([getattr(data, attr) for _, attr in CSV_COLUMNS])
    # utf-8-sig so Excel picks up the rupee sign
    return buffer.getvalue().encode("utf-8-sig")


def sample_invoice(settings: Settings, today: Optional[date] = None) -> InvoicePreviewData:
    """The sample invoice attached to the free template email."""
    today = today or date.today()
    upi = f"upi://pay?pa=yourstudio@upi&pn={quote(settings.SAMPLE_BUSINESS_NAME)}&am={settings.PRICE_INR}&cu=INR"
    return InvoicePreviewData(
        invoice_number=f"INV-{today:%Y}-001",
        business_name=settings.SAMPLE_BUSINESS_NAME,
        business_gstin=settings.SAMPLE_BUSINESS_GSTIN,
        client_name="Acme Clients Pvt Ltd",
        client_address_line1="221B MG Road",
        client_address_line2="Pune, Maharashtra 411001",
        invoice_date=today.strftime("%d %b %Y"),
        due_date=(today + timedelta(days=15)).strftime("%d %b %Y"),
        item_description="Website design and development",
        amount_inr=f"INR {settings.PRICE_INR}",
        qr_url=f"https://api.qrserver.com/v1/create-qr-code/?size=140x140&data={quote(upi, safe='')}",
    )
