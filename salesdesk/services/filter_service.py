"""Filter service — narrows a list of sales to what the current view asks for.

Pure functions: nothing here touches the database. Callers pass in the
sales they already loaded and get back a new list in the same order.

- filter_sales: the sales panel / kanban filter bar
- filter_by_period: the performance view (seller + date range)
"""

from dataclasses import dataclass, fields


@dataclass
class SaleFilters:
    """Transient query criteria. Empty or None means "any"."""

    unit_name: str = ""
    seller_name: str = ""
    registered_on: str = ""  # prefix: "2025", "2025-03", "2025-03-14"
    customer_name: str = ""  # case-insensitive substring
    category: str = ""
    source: str = ""
    status: str = ""
    stage: str = ""

    @classmethod
    def from_mapping(cls, data):
        """Build filters from request.args (or any mapping). Unknown keys are ignored."""
        values = {}
        for f in fields(cls):
            raw = data.get(f.name)
            values[f.name] = raw.strip() if isinstance(raw, str) else ""
        return cls(**values)

    def is_empty(self):
        return not any(getattr(self, f.name) for f in fields(self))


# Fields compared with plain equality.
_EXACT_FIELDS = ("unit_name", "seller_name", "category", "source", "status", "stage")


def _date_str(value):
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return value.isoformat()


def matches(sale, filters):
    """Return True if a single sale satisfies every non-empty criterion."""
    for name in _EXACT_FIELDS:
        wanted = getattr(filters, name)
        if wanted and getattr(sale, name) != wanted:
            return False

    if filters.registered_on and not _date_str(sale.registered_on).startswith(
        filters.registered_on
    ):
        return False

    if filters.customer_name:
        needle = filters.customer_name.lower()
        if needle not in (sale.customer_name or "").lower():
            return False

    return True


def filter_sales(sales, filters=None):
    """Return the sales matching `filters`, preserving input order.

    An empty (or missing) filter set returns every sale.
    """
    if filters is None or filters.is_empty():
        return list(sales)
    return [s for s in sales if matches(s, filters)]


def filter_by_period(sales, seller_name=None, start=None, end=None):
    """Filter for the performance view.

    Args:
        sales: iterable of Sale rows
        seller_name: exact seller name, or empty for all sellers
        start: inclusive ISO date lower bound ("YYYY-MM-DD"), optional
        end: inclusive ISO date upper bound, optional

    ISO dates sort lexicographically, so the bounds are compared as strings.
    """
    result = []
    for sale in sales:
        registered = _date_str(sale.registered_on)
        if seller_name and sale.seller_name != seller_name:
            continue
        if start and registered < start:
            continue
        if end and registered > end:
            continue
        result.append(sale)
    return result
