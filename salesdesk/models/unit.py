"""Unit models.

- Unit: a business location / branch.
- UnitSellerLink: join rows listing which sellers may sell for a unit.

The link table carries no foreign key to sellers: deleting a seller leaves
its links in place. Deleting a unit removes its links (team_service).
"""

from salesdesk.extensions import db


class Unit(db.Model):
    __tablename__ = "units"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(255), nullable=False)  # unique, case-insensitive, on create
    active = db.Column(db.Boolean, default=True, nullable=False)

    def to_dict(self):
        return {"id": self.id, "name": self.name, "active": self.active}

    def __repr__(self):
        return f"<Unit {self.name}>"


class UnitSellerLink(db.Model):
    __tablename__ = "unit_seller_links"

    unit_id = db.Column(db.Integer, primary_key=True)
    seller_id = db.Column(db.Integer, primary_key=True)
    position = db.Column(db.Integer, nullable=False, default=0)

    def __repr__(self):
        return f"<UnitSellerLink unit={self.unit_id} seller={self.seller_id}>"
