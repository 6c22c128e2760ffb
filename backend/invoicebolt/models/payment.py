"""
Payment Model — Tracks launch pre-orders placed through Razorpay.
"""
from sqlalchemy import Column, String, Integer, DateTime, Text

from invoicebolt.database import Base


class Payment(Base):
    __tablename__ = "payments"

    id = Column(String(36), primary_key=True)
    merchant_transaction_id = Column(String(64), unique=True, nullable=False, index=True)

    amount = Column(Integer, nullable=False)      # Amount in paise
    description = Column(Text, nullable=False)
    user_id = Column(String(64), nullable=True)

    # Status tracking
    status = Column(String(16), nullable=False, default="pending")  # pending | success | failed
    gateway_order_id = Column(String(64), nullable=False)
    gateway_payment_id = Column(String(64))
    payment_method = Column(String(32))
    failure_reason = Column(Text)

    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=True)
