"""
Roster validation at the data-entry boundary.

The payroll calculator trusts whatever prices it is given; these checks are
run when clients and supervision settings are created or imported.
"""

import math
from collections.abc import Iterable

from core.config import MAX_SESSION_PRICE, MAX_SUPERVISION_PRICE, PRICE_SPLIT_TOLERANCE
from core.normalize import names_match
from models.payroll import Client, SupervisionConfig


def validate_prices(
    price: float, employee_price: float, company_price: float, max_price: float
) -> list[str]:
    """
    Check a price triple.

    Rules:
    1. All prices finite and >= 0
    2. No price above max_price
    3. Neither share above the total
    4. employee_price + company_price == price (0.01 tolerance)
    """
    errors = []
    fields = {"price": price, "employee price": employee_price, "company price": company_price}

    for label, value in fields.items():
        if not math.isfinite(value):
            errors.append(f"Invalid {label} '{value}'")
        elif value < 0:
            errors.append(f"Negative {label} {value:.2f}")
        elif value > max_price:
            errors.append(f"{label.capitalize()} {value:.2f} exceeds maximum {max_price:.2f}")

    if errors:
        return errors

    if employee_price > price:
        errors.append("Employee price cannot exceed the session price")
    if company_price > price:
        errors.append("Company price cannot exceed the session price")
    if abs(employee_price + company_price - price) > PRICE_SPLIT_TOLERANCE:
        errors.append(
            f"Employee price ({employee_price:.2f}) + company price ({company_price:.2f}) "
            f"must equal price ({price:.2f})"
        )
    return errors


def validate_client(client: Client, existing_clients: Iterable[Client] = ()) -> list[str]:
    """Validate a client for creation or update; returns error messages (empty if valid)."""
    errors = []

    if not client.name.strip():
        errors.append("Client name is required")
    else:
        # Same first two words for the same employee would be indistinguishable to the matcher
        for other in existing_clients:
            if (
                other.id != client.id
                and other.employee_id == client.employee_id
                and names_match(other.name, client.name)
            ):
                errors.append(f"Client '{other.name}' already exists for this employee")
                break

    errors.extend(
        validate_prices(client.price, client.employee_price, client.company_price, MAX_SESSION_PRICE)
    )
    return errors


def validate_supervision_config(config: SupervisionConfig) -> list[str]:
    errors = validate_prices(
        config.price, config.employee_price, config.company_price, MAX_SUPERVISION_PRICE
    )
    if config.enabled and not any(k.strip() for k in config.keywords):
        errors.append("Supervision is enabled but has no keywords")
    return errors
