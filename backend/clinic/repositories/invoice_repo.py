from decimal import Decimal
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import selectinload

from clinic.core.exceptions import NotFoundError
from clinic.db.base import Invoice as InvoiceModel
from clinic.db.base import InvoiceItem as InvoiceItemModel
from clinic.domain.entities import Invoice, InvoiceItem, InvoiceStatus
from clinic.domain.interfaces import IInvoiceRepository


class InvoiceRepository(IInvoiceRepository):
    def __init__(self, db_session):
        self.db = db_session

    def get_by_id(self, invoice_id: int) -> Optional[Invoice]:
        db_invoice = (
            self.db.query(InvoiceModel)
            .options(selectinload(InvoiceModel.items))
            .filter(InvoiceModel.id == invoice_id)
            .first()
        )
        return self._to_domain(db_invoice) if db_invoice else None

    def create(self, invoice: Invoice) -> Invoice:
        db_invoice = InvoiceModel(
            appointment_id=invoice.appointment_id,
            patient_id=invoice.patient_id,
            total_amount=invoice.total_amount,
            status=invoice.status.value,
            paid_at=invoice.paid_at,
            document=invoice.document,
        )
        if invoice.created_at is not None:
            db_invoice.created_at = invoice.created_at
        for item in invoice.items:
            db_invoice.items.append(
                InvoiceItemModel(
                    description=item.description,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                )
            )
        self.db.add(db_invoice)
        self.db.flush()
        return self._to_domain(db_invoice)

    def update(self, invoice: Invoice) -> Invoice:
        db_invoice = self.db.get(InvoiceModel, invoice.id)
        if not db_invoice:
            raise NotFoundError("Invoice not found.")
        db_invoice.status = invoice.status.value
        db_invoice.paid_at = invoice.paid_at
        db_invoice.total_amount = invoice.total_amount
        db_invoice.document = invoice.document
        self.db.flush()
        return self._to_domain(db_invoice)

    def count(self, status: Optional[InvoiceStatus] = None) -> int:
        query = self.db.query(InvoiceModel)
        if status is not None:
            query = query.filter(InvoiceModel.status == status.value)
        return query.count()

    def sum_total(self, status: InvoiceStatus) -> Decimal:
        total = (
            self.db.query(func.coalesce(func.sum(InvoiceModel.total_amount), 0))
            .filter(InvoiceModel.status == status.value)
            .scalar()
        )
        return Decimal(str(total)).quantize(Decimal("0.01"))

    def _to_domain(self, db_invoice: InvoiceModel) -> Invoice:
        return Invoice(
            id=db_invoice.id,
            appointment_id=db_invoice.appointment_id,
            patient_id=db_invoice.patient_id,
            total_amount=db_invoice.total_amount,
            status=InvoiceStatus(db_invoice.status),
            created_at=db_invoice.created_at,
            paid_at=db_invoice.paid_at,
            document=db_invoice.document,
            items=[
                InvoiceItem(
                    id=i.id,
                    invoice_id=i.invoice_id,
                    description=i.description,
                    quantity=i.quantity,
                    unit_price=i.unit_price,
                )
                for i in db_invoice.items
            ],
        )
