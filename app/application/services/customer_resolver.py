"""Customer resolver — find, merge or create the customer behind an order.

Lookup order is phone first (any number on the profile), then primary email.
A matched profile collects every new phone and email and takes the latest
non-empty billing details; an unmatched order creates a profile keyed by its
email. Nothing is cached between orders: every order re-reads the store so
merges made earlier in the same run are visible.
"""

import re
from typing import Any, Optional

import structlog

from app.config import get_settings
from app.core.exceptions import MissingIdentityKeyError
from app.domain.models.customer import Customer
from app.domain.repositories.customer_repository import CustomerRepository
from app.domain.schemas.order import OrderAggregate

settings = get_settings()
logger = structlog.get_logger(__name__)

# Overwritten on a matched profile whenever the incoming order carries a value
MERGED_FIELDS = (
    "party_name",
    "company_billing",
    "gst_number",
    "address",
    "pincode",
    "state_name",
    "customer_user_id",
    "customer_username",
)

# Required columns filled with the placeholder when a new profile lacks them
PLACEHOLDER_FIELDS = ("party_name", "company_billing", "address", "pincode", "country", "state_name")


def normalize_phone(phone: Any) -> str:
    """Digits only, with the national prefix dropped from numbers longer than a local number."""
    if phone is None:
        return ""
    digits = re.sub(r"\D", "", str(phone))
    prefix = settings.PHONE_NATIONAL_PREFIX
    if len(digits) > settings.PHONE_LOCAL_LENGTH and digits.startswith(prefix):
        digits = digits[len(prefix):]
    return digits


def _append_unique(values: Optional[list], value: str) -> Optional[list]:
    """Return a new list with value appended, or None when it is already there."""
    current = list(values or [])
    if not value or value in current:
        return None
    return current + [value]


def _merge_into(customer: Customer, order: OrderAggregate, phone: str, email: str) -> None:
    phones = _append_unique(customer.all_phones, phone)
    if phones is not None:
        customer.all_phones = phones

    emails = _append_unique(customer.all_emails, email)
    if emails is not None:
        customer.all_emails = emails

    for field in MERGED_FIELDS:
        value = getattr(order, field)
        if value:
            setattr(customer, field, value)


def _new_customer(order: OrderAggregate, phone: str, email: str) -> Customer:
    if not email:
        raise MissingIdentityKeyError(order.party_name)

    fields = {field: getattr(order, field) or settings.CUSTOMER_PLACEHOLDER for field in PLACEHOLDER_FIELDS}
    return Customer(
        email=email,
        all_emails=[email],
        all_phones=[phone] if phone else [],
        gst_number=order.gst_number,
        customer_user_id=order.customer_user_id,
        customer_username=order.customer_username,
        **fields,
    )


async def resolve_customer(repo: CustomerRepository, order: OrderAggregate) -> Customer:
    """Return the customer for an order, creating or merging the profile inside the caller's transaction."""
    phone = normalize_phone(order.phone)
    email = (order.email or "").strip()

    customer = None
    if phone:
        customer = await repo.find_by_phone(phone)

    if customer is None and email:
        customer = await repo.find_by_email(email)
    elif customer is not None and email and email not in (customer.all_emails or []):
        # The phone match wins; a separate profile owning this email is left as is.
        other = await repo.find_by_email(email)
        if other is not None and other.id != customer.id:
            logger.warning(
                "Phone and email match different customers",
                bill_number=order.bill_number,
                phone_customer_id=customer.id,
                email_customer_id=other.id,
            )

    if customer is not None:
        _merge_into(customer, order, phone, email)
    else:
        customer = _new_customer(order, phone, email)
        logger.debug("Creating customer profile", email=email, bill_number=order.bill_number)

    return await repo.add(customer)
