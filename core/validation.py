"""
Business validation for service orders.

Pydantic already rejects structurally invalid input (unknown status values,
wrong types). These checks cover what the shop considers an acceptable
order: named items, positive quantities, non-negative amounts, and a
delivery date that does not precede entry. They return messages instead of
raising so a form can show every problem at once.

The calculators in core.pricing do not call these; they compute whatever
they are given.
"""

from typing import Any

from pydantic import BaseModel, Field

from core.models.service_order import ServiceItem, ServiceOrder
from core.numbers import to_number


class ServiceOrderValidationErrors(BaseModel):
    """Validation messages grouped by field."""

    customer_id: str | None = None
    equipment: str | None = None
    services: list[str] = Field(default_factory=list)
    general: list[str] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return (
            self.customer_id is None
            and self.equipment is None
            and not self.services
            and not self.general
        )

    def messages(self) -> list[str]:
        """All messages, flattened in field order."""
        result = []
        if self.customer_id:
            result.append(self.customer_id)
        if self.equipment:
            result.append(self.equipment)
        result.extend(self.services)
        result.extend(self.general)
        return result


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def validate_service_item(item: ServiceItem, index: int) -> list[str]:
    """
    Check one item. index is zero-based; messages number items from 1.
    """
    errors = []
    position = index + 1

    if _is_blank(item.description):
        errors.append(f"Descrição do serviço {position} é obrigatória")
    if item.quantity <= 0:
        errors.append(f"Quantidade do serviço {position} deve ser maior que 0")
    if item.unit_value < 0:
        errors.append(f"Valor do serviço {position} deve ser maior ou igual a 0")
    if item.discount < 0:
        errors.append(f"Desconto do serviço {position} deve ser maior ou igual a 0")
    if item.addition < 0:
        errors.append(f"Acréscimo do serviço {position} deve ser maior ou igual a 0")

    return errors


def _check_percentage(value: Any, label: str) -> str | None:
    if value is None:
        return None
    number = to_number(value)
    if number < 0 or number > 100:
        return f"{label} deve estar entre 0 e 100"
    return None


def _effective(data: Any, stored: ServiceOrder | None, name: str) -> Any:
    value = getattr(data, name, None)
    if value is None and stored is not None:
        return getattr(stored, name)
    return value


def validate_service_order(
    data: Any,
    partial: bool = False,
    stored: ServiceOrder | None = None,
) -> ServiceOrderValidationErrors:
    """
    Check an order payload (ServiceOrderCreate, ServiceOrderUpdate or ServiceOrder).

    Args:
        data: Order payload
        partial: True for updates - missing customer/equipment are not errors,
            only present-but-blank values are
        stored: Order being edited. Dates the payload leaves out are taken
            from it, so a new entry date is checked against the stored
            delivery date

    Returns:
        ServiceOrderValidationErrors; check is_valid
    """
    errors = ServiceOrderValidationErrors()

    customer_id = getattr(data, "customer_id", None)
    equipment = getattr(data, "equipment", None)

    if (not partial or customer_id is not None) and _is_blank(customer_id):
        errors.customer_id = "ID do cliente é obrigatório"
    if (not partial or equipment is not None) and _is_blank(equipment):
        errors.equipment = "Equipamento é obrigatório"

    # Stored dates only count when the payload moves one of them
    if getattr(data, "entry_date", None) is not None or getattr(data, "delivery_date", None) is not None:
        entry_date = _effective(data, stored, "entry_date")
        delivery_date = _effective(data, stored, "delivery_date")
    else:
        entry_date = delivery_date = None
    if entry_date is not None and delivery_date is not None and delivery_date < entry_date:
        errors.general.append("Data de entrega não pode ser anterior à data de entrada")

    for label, field in (("Desconto percentual", "discount_percentage"),
                         ("Acréscimo percentual", "addition_percentage")):
        message = _check_percentage(getattr(data, field, None), label)
        if message:
            errors.general.append(message)

    for index, item in enumerate(getattr(data, "services", None) or []):
        errors.services.extend(validate_service_item(item, index))

    return errors
