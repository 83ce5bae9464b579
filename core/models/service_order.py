"""Service order (repair ticket) domain models.

Records round-trip the persistence API's camelCase wire format. Money and
quantity fields are normalized by core.numbers.to_number on the way in, so
malformed persisted values read as 0 instead of failing validation.

Aggregates the API may persist alongside an order (servicesSum,
totalDiscount, ...) are ignored on input: totals are always recomputed from
the items.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated

from pydantic import AliasChoices, BaseModel, BeforeValidator, Field, computed_field
from pydantic.alias_generators import to_camel

from core.numbers import to_number
from core.pricing import OrderTotals, calculate_totals, item_total
from utils.timezone import now_utc, parse_timestamp

Number = Annotated[float, BeforeValidator(to_number)]
Timestamp = Annotated[datetime, BeforeValidator(parse_timestamp)]
OptionalTimestamp = Annotated[datetime | None, BeforeValidator(parse_timestamp)]

_WIRE_CONFIG = {"alias_generator": to_camel, "populate_by_name": True}


class ServiceOrderStatus(str, Enum):
    """Technical (repair workflow) status."""

    CONFIRMAR = "confirmar"
    APROVADO = "aprovado"
    PRONTO = "pronto"
    ENTREGUE = "entregue"
    REPROVADO = "reprovado"

    @property
    def label(self) -> str:
        return STATUS_LABELS[self]


class FinancialStatus(str, Enum):
    """Billing status, tracked independently of the technical status."""

    EM_ABERTO = "em_aberto"
    PAGO = "pago"
    PARCIALMENTE_PAGO = "parcialmente_pago"
    DEVE = "deve"
    FATURADO = "faturado"
    VENCIDO = "vencido"
    CANCELADO = "cancelado"

    @property
    def label(self) -> str:
        return FINANCIAL_LABELS[self]


class PaymentType(str, Enum):
    CASH = "cash"
    INSTALLMENT = "installment"
    STORE_CREDIT = "store_credit"


STATUS_LABELS = {
    ServiceOrderStatus.CONFIRMAR: "Aguardando Confirmação",
    ServiceOrderStatus.APROVADO: "Aprovado",
    ServiceOrderStatus.PRONTO: "Pronto",
    ServiceOrderStatus.ENTREGUE: "Entregue",
    ServiceOrderStatus.REPROVADO: "Reprovado",
}

FINANCIAL_LABELS = {
    FinancialStatus.EM_ABERTO: "Em Aberto",
    FinancialStatus.PAGO: "Pago",
    FinancialStatus.PARCIALMENTE_PAGO: "Parcialmente Pago",
    FinancialStatus.DEVE: "Deve",
    FinancialStatus.FATURADO: "Faturado",
    FinancialStatus.VENCIDO: "Vencido",
    FinancialStatus.CANCELADO: "Cancelado",
}


class ServiceItem(BaseModel):
    """One billable line (labor or part) on an order.

    ``total`` is derived and never read from input.
    """

    description: str = ""
    quantity: Number = 1.0
    unit_value: Number = Field(
        0.0,
        validation_alias=AliasChoices("unitValue", "value", "unit_value"),
        serialization_alias="unitValue",
    )
    discount: Number = 0.0
    addition: Number = 0.0

    model_config = _WIRE_CONFIG

    @computed_field
    @property
    def total(self) -> float:
        """quantity * unit_value - discount + addition, unclamped."""
        return item_total(self)


class ServiceOrder(BaseModel):
    """Full service order as stored by the persistence API."""

    id: str | None = Field(None, validation_alias=AliasChoices("_id", "id"), serialization_alias="_id")
    order_number: int
    customer_id: str | None = None
    equipment: str | None = None
    model: str | None = None
    brand: str | None = None
    serial_number: str | None = None
    voltage: str | None = None
    accessories: str | None = None
    customer_observations: str | None = None
    reported_defect: str | None = None
    warranty: bool = False
    is_return: bool = False
    notes: str | None = None

    status: ServiceOrderStatus = ServiceOrderStatus.CONFIRMAR
    financial: FinancialStatus = FinancialStatus.EM_ABERTO
    payment_type: PaymentType = PaymentType.CASH
    installment_count: int = 1
    paid_installments: int = 0

    services: list[ServiceItem] = Field(default_factory=list)
    discount_percentage: Number = 0.0
    addition_percentage: Number = 0.0
    total_amount_paid: Number = 0.0
    total_amount_left: Number = 0.0

    entry_date: Timestamp
    approval_date: OptionalTimestamp = None
    expected_delivery_date: OptionalTimestamp = None
    delivery_date: OptionalTimestamp = None

    model_config = {**_WIRE_CONFIG, "protected_namespaces": ()}

    @property
    def totals(self) -> OrderTotals:
        """Current financial breakdown. Never cached."""
        return calculate_totals(self.services, self.discount_percentage, self.addition_percentage)

    @property
    def is_awaiting_confirmation(self) -> bool:
        return self.status == ServiceOrderStatus.CONFIRMAR


class ServiceOrderCreate(BaseModel):
    """Payload for creating an order. The order number is assigned by the API."""

    customer_id: str
    equipment: str
    model: str | None = None
    brand: str | None = None
    serial_number: str | None = None
    voltage: str | None = None
    accessories: str | None = None
    customer_observations: str | None = None
    reported_defect: str | None = None
    warranty: bool = False
    is_return: bool = False
    notes: str | None = None

    status: ServiceOrderStatus = ServiceOrderStatus.CONFIRMAR
    financial: FinancialStatus = FinancialStatus.EM_ABERTO
    payment_type: PaymentType = PaymentType.CASH
    installment_count: int = Field(1, ge=1)

    services: list[ServiceItem] = Field(default_factory=list)
    discount_percentage: Number = 0.0
    addition_percentage: Number = 0.0

    entry_date: Timestamp = Field(default_factory=now_utc)
    expected_delivery_date: OptionalTimestamp = None
    delivery_date: OptionalTimestamp = None

    model_config = {**_WIRE_CONFIG, "protected_namespaces": ()}


class ServiceOrderUpdate(BaseModel):
    """Editable order fields. All optional.

    Status and financial status are not here: they change through
    ServiceOrderService.update_status / update_financial.
    """

    customer_id: str | None = None
    equipment: str | None = None
    model: str | None = None
    brand: str | None = None
    serial_number: str | None = None
    voltage: str | None = None
    accessories: str | None = None
    customer_observations: str | None = None
    reported_defect: str | None = None
    warranty: bool | None = None
    is_return: bool | None = None
    notes: str | None = None
    payment_type: PaymentType | None = None
    installment_count: int | None = Field(None, ge=1)
    paid_installments: int | None = Field(None, ge=0)
    services: list[ServiceItem] | None = None
    discount_percentage: Annotated[float | None, BeforeValidator(lambda v: None if v is None else to_number(v))] = None
    addition_percentage: Annotated[float | None, BeforeValidator(lambda v: None if v is None else to_number(v))] = None
    entry_date: OptionalTimestamp = None
    expected_delivery_date: OptionalTimestamp = None

    model_config = {**_WIRE_CONFIG, "protected_namespaces": ()}


class StatusUpdate(BaseModel):
    """Technical status change, with the timestamp fields it carries.

    Fields that were never set are left out of the PUT body; fields set to
    None are sent as null and clear the stored value.
    """

    status: ServiceOrderStatus
    approval_date: OptionalTimestamp = None
    delivery_date: OptionalTimestamp = None
    expected_delivery_date: OptionalTimestamp = None

    model_config = _WIRE_CONFIG

    def to_patch(self) -> dict:
        """Wire body containing only the fields this update touches."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class FinancialStatusUpdate(BaseModel):
    """Financial status change. No side effects."""

    financial: FinancialStatus

    model_config = _WIRE_CONFIG

    def to_patch(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
