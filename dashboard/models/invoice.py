import uuid

from sqlalchemy import Column, Integer, String, Date, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from dashboard.core.database import Base

STATUS_PENDING = "pending"
STATUS_PAID = "paid"
INVOICE_STATUSES = (STATUS_PENDING, STATUS_PAID)


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    customer_id = Column(String(36), ForeignKey("customers.id"), nullable=False)
    # сумма в центах
    amount = Column(Integer, nullable=False)
    status = Column(String(255), nullable=False)
    date = Column(Date, nullable=False, index=True)

    customer = relationship("Customer", back_populates="invoices")

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'paid')", name="ck_invoices_status"
        ),
    )
