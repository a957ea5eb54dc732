"""Sale model (pipeline opportunity).

Tracks a deal from first contact through closing or loss.
Funnel: Lead -> Prospecting -> Negotiation -> Closing (or Lost)

Unit and seller are stored by name, not by id: renaming or deleting a
unit/seller never touches historical sales.
"""

from salesdesk.extensions import db


class Sale(db.Model):
    __tablename__ = "sales"
    # Ids are never reused, even after the highest row is removed.
    __table_args__ = {"sqlite_autoincrement": True}

    # -- Closed enumerations --
    CATEGORIES = ["Product A", "Product B", "Service X", "Service Y"]
    SOURCES = ["Website", "Referral", "TradeShow", "Ad"]
    STATUSES = ["Active", "Closed", "Lost"]
    STAGES = ["Lead", "Prospecting", "Negotiation", "Closing", "Lost"]

    # -- Fields the detail view may replace on update --
    EDITABLE_FIELDS = [
        "unit_name",
        "seller_name",
        "customer_name",
        "phone",
        "category",
        "source",
        "status",
        "stage",
        "initial_value",
        "sale_value",
        "rating",
        "expected_close_on",
        "city",
        "address",
        "whatsapp",
        "email",
        "social_handles",
    ]

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    registered_on = db.Column(db.Date, nullable=False)  # set once, on creation
    unit_name = db.Column(db.String(255), nullable=False)
    seller_name = db.Column(db.String(255), nullable=False)
    customer_name = db.Column(db.String(255), nullable=False)
    phone = db.Column(db.String(50), nullable=False)  # unique at creation only
    category = db.Column(
        db.String(50), nullable=False
    )  # Product A | Product B | Service X | Service Y
    source = db.Column(
        db.String(50), nullable=False
    )  # Website | Referral | TradeShow | Ad
    status = db.Column(
        db.String(50), default="Active", nullable=False
    )  # Active | Closed | Lost
    stage = db.Column(
        db.String(50), default="Lead", nullable=False
    )  # Lead | Prospecting | Negotiation | Closing | Lost
    initial_value = db.Column(
        db.Numeric(12, 2, asdecimal=False), default=0, nullable=False
    )
    sale_value = db.Column(
        db.Numeric(12, 2, asdecimal=False), default=0, nullable=False
    )

    # --- Detail fields ---
    rating = db.Column(db.Integer, nullable=True)  # 1-5
    expected_close_on = db.Column(db.Date, nullable=True)
    city = db.Column(db.String(255), nullable=True)
    address = db.Column(db.String(500), nullable=True)
    whatsapp = db.Column(db.String(50), nullable=True)
    email = db.Column(db.String(255), nullable=True)
    social_handles = db.Column(db.String(500), nullable=True)

    def to_dict(self):
        """Serialize to a JSON-safe dict."""
        return {
            "id": self.id,
            "registered_on": self.registered_on.isoformat() if self.registered_on else None,
            "unit_name": self.unit_name,
            "seller_name": self.seller_name,
            "customer_name": self.customer_name,
            "phone": self.phone,
            "category": self.category,
            "source": self.source,
            "status": self.status,
            "stage": self.stage,
            "initial_value": self.initial_value,
            "sale_value": self.sale_value,
            "rating": self.rating,
            "expected_close_on": (
                self.expected_close_on.isoformat() if self.expected_close_on else None
            ),
            "city": self.city,
            "address": self.address,
            "whatsapp": self.whatsapp,
            "email": self.email,
            "social_handles": self.social_handles,
        }

    def __repr__(self):
        return f"<Sale {self.id} {self.customer_name} ({self.stage}/{self.status})>"
