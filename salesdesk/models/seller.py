"""Seller model — a person who can be assigned deals.

Roles are data only; nothing in the app enforces them.
"""

from salesdesk.extensions import db


class Seller(db.Model):
    __tablename__ = "sellers"
    __table_args__ = {"sqlite_autoincrement": True}

    ROLES = ["Master", "Manager", "TeamMember"]

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), nullable=True)
    phone = db.Column(db.String(50), nullable=True)
    role = db.Column(
        db.String(50), default="TeamMember", nullable=False
    )  # Master | Manager | TeamMember
    active = db.Column(db.Boolean, default=True, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "role": self.role,
            "active": self.active,
        }

    def __repr__(self):
        return f"<Seller {self.name} ({self.role})>"
