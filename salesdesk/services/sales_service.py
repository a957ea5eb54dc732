"""Sales service — create, update, list and validate sales.

Store functions assume their input already passed validation and never
raise for it: an update whose id matches nothing is a silent no-op.

Validation lives here too but runs *before* the store is touched. It
returns field-keyed messages instead of raising, so the caller can show
them next to the inputs:

    data, errors = validate_new_sale(request_json, existing_phones())
    if errors:
        return jsonify({"errors": errors}), 400
    sale = add_sale(data)
"""

import logging
import math
from datetime import date, datetime, timezone

from salesdesk.extensions import db
from salesdesk.models.sale import Sale

logger = logging.getLogger(__name__)

REQUIRED_ON_CREATE = {
    "unit_name": "Unit is required.",
    "seller_name": "Seller is required.",
    "customer_name": "Customer name is required.",
    "phone": "Phone is required.",
    "sale_value": "Sale value is required.",
}

TEXT_DETAIL_FIELDS = ["city", "address", "whatsapp", "email", "social_handles"]


# ─── Store ───────────────────────────────────────────────────────

def list_sales():
    """All sales, most recently created first."""
    return Sale.query.order_by(Sale.id.desc()).all()


def get_sale(sale_id):
    return db.session.get(Sale, sale_id)


def existing_phones():
    return {phone for (phone,) in db.session.query(Sale.phone).all()}


def add_sale(data):
    """Create a sale from validated form data.

    id, registration date, stage and status are assigned here; whatever the
    caller put in those keys is ignored. New sales start as Lead / Active.

    Returns:
        Sale: the new row (first in list_sales()).
    """
    sale = Sale(
        registered_on=datetime.now(timezone.utc).date(),
        stage="Lead",
        status="Active",
    )
    for field in Sale.EDITABLE_FIELDS:
        if field in ("stage", "status"):
            continue
        if field in data:
            setattr(sale, field, data[field])
    if sale.initial_value is None:
        sale.initial_value = 0

    db.session.add(sale)
    db.session.commit()
    logger.info(f"Sale {sale.id} created for {sale.customer_name} ({sale.unit_name})")
    return sale


def update_sale(record):
    """Merge the given values into the sale matching record["id"].

    Fields absent from `record` keep their value, so sending the full record
    replaces it. id and registration date never change. Phone uniqueness is
    not re-checked.

    Returns:
        Sale or None: the updated sale, None if no sale has that id.
    """
    sale = db.session.get(Sale, record.get("id"))
    if sale is None:
        logger.info(f"Ignored update for unknown sale {record.get('id')}")
        return None

    for field in Sale.EDITABLE_FIELDS:
        if field in record:
            setattr(sale, field, record[field])
    db.session.commit()
    return sale


# ─── Validation ──────────────────────────────────────────────────

def parse_money(raw):
    """Parse a currency input ("1500", "1500.50", "1500,50", 1500) into a float.

    Returns None for blank, unparseable or non-finite input (nan, inf).
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        return float(raw) if math.isfinite(raw) else None
    text = str(raw).strip().replace(" ", "")
    if not text:
        return None
    if "," in text and "." not in text:
        text = text.replace(",", ".")
    try:
        value = float(text)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def _parse_date(raw):
    if raw in (None, ""):
        return None
    if isinstance(raw, date):
        return raw
    return date.fromisoformat(str(raw).strip())


def _clean_text(raw):
    if raw is None:
        return None
    return str(raw).strip() or None


def _clean_money(form, field, errors, required=False, message=None):
    """Parse a money field into `field`'s value; record an error on failure."""
    raw = form.get(field)
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        if required:
            errors[field] = message or "This value is required."
        return None
    value = parse_money(raw)
    if value is None:
        errors[field] = "Enter a number."
    elif value < 0:
        errors[field] = "Value cannot be negative."
    return value


def _clean_choice(form, field, choices, errors, default=None):
    value = _clean_text(form.get(field)) or default
    if value is not None and value not in choices:
        errors[field] = f"Must be one of: {', '.join(choices)}"
    return value


def _parse_rating(raw):
    """Whole number from an int, an integral float or a digit string; else None."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, float):
        return int(raw) if raw.is_integer() else None
    try:
        return int(str(raw).strip())
    except ValueError:
        return None


def _clean_details(form, data, errors):
    """Optional detail-view fields: rating, expected close date, contact info."""
    if "rating" in form:
        raw = form.get("rating")
        if raw in (None, ""):
            data["rating"] = None
        else:
            rating = _parse_rating(raw)
            if rating is None or not 1 <= rating <= 5:
                errors["rating"] = "Rating must be between 1 and 5."
            else:
                data["rating"] = rating

    if "expected_close_on" in form:
        try:
            data["expected_close_on"] = _parse_date(form.get("expected_close_on"))
        except ValueError:
            errors["expected_close_on"] = "Use the YYYY-MM-DD format."

    for field in TEXT_DETAIL_FIELDS:
        if field in form:
            data[field] = _clean_text(form.get(field))


def validate_new_sale(form, phones):
    """Check an add-sale form.

    Args:
        form: mapping of submitted values (JSON body or form data)
        phones: phones already registered, for the duplicate check

    Returns:
        tuple: (data, errors)
            - data: cleaned values ready for add_sale()
            - errors: {field: message}, empty when the form is valid
    """
    errors = {}
    data = {}

    for field in ("unit_name", "seller_name", "customer_name", "phone"):
        value = _clean_text(form.get(field))
        if not value:
            errors[field] = REQUIRED_ON_CREATE[field]
        data[field] = value

    if data["phone"] and data["phone"] in phones:
        errors["phone"] = "This phone number is already registered."

    data["sale_value"] = _clean_money(
        form, "sale_value", errors, required=True,
        message=REQUIRED_ON_CREATE["sale_value"],
    )
    data["initial_value"] = _clean_money(form, "initial_value", errors) or 0

    data["category"] = _clean_choice(form, "category", Sale.CATEGORIES, errors, default="Product A")
    data["source"] = _clean_choice(form, "source", Sale.SOURCES, errors, default="Website")

    _clean_details(form, data, errors)
    return data, errors


def validate_sale_update(form):
    """Check a detail-view save. Only submitted fields are validated and returned.

    Returns:
        tuple: (data, errors) — data always carries "id".
    """
    errors = {}
    data = {"id": form.get("id")}

    for field in ("unit_name", "seller_name", "customer_name", "phone"):
        if field in form:
            value = _clean_text(form.get(field))
            if not value:
                errors[field] = REQUIRED_ON_CREATE[field]
            data[field] = value

    if "sale_value" in form:
        data["sale_value"] = _clean_money(
            form, "sale_value", errors, required=True,
            message=REQUIRED_ON_CREATE["sale_value"],
        )
    if "initial_value" in form:
        data["initial_value"] = _clean_money(form, "initial_value", errors) or 0

    for field, choices in (
        ("category", Sale.CATEGORIES),
        ("source", Sale.SOURCES),
        ("status", Sale.STATUSES),
        ("stage", Sale.STAGES),
    ):
        if field in form:
            value = _clean_choice(form, field, choices, errors)
            if value is None:
                errors[field] = f"Must be one of: {', '.join(choices)}"
            data[field] = value

    _clean_details(form, data, errors)
    return data, errors
