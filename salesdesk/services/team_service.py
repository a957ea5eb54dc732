"""Team service — units, sellers, and which sellers work for which unit.

Create guards are silent: an empty name or one that already exists
(case-insensitive) is ignored and the function returns None. Lookups by an
unknown id are no-ops too.

Deleting a unit also drops its link entry. Deleting a seller does not
touch the links; a unit may keep listing a seller id that no longer exists.
"""

import logging

from sqlalchemy import func

from salesdesk.extensions import db
from salesdesk.models.seller import Seller
from salesdesk.models.unit import Unit, UnitSellerLink

logger = logging.getLogger(__name__)


def _name_taken(model, name):
    return (
        model.query.filter(func.lower(model.name) == name.lower()).first()
        is not None
    )


# ─── Units ───────────────────────────────────────────────────────

def list_units(active_only=False):
    query = Unit.query
    if active_only:
        query = query.filter_by(active=True)
    return query.order_by(Unit.id).all()


def add_unit(name):
    """Create an active unit. Returns None for a blank or duplicate name."""
    name = (name or "").strip()
    if not name or _name_taken(Unit, name):
        logger.info(f"Ignored unit create: {name!r} is blank or already exists")
        return None

    unit = Unit(name=name, active=True)
    db.session.add(unit)
    db.session.commit()
    logger.info(f"Unit {unit.id} created: {name}")
    return unit


def update_unit(unit_id, name):
    """Rename a unit. Uniqueness is only checked on create."""
    unit = db.session.get(Unit, unit_id)
    if unit is None:
        return None
    unit.name = name
    db.session.commit()
    return unit


def toggle_unit_status(unit_id):
    unit = db.session.get(Unit, unit_id)
    if unit is None:
        return None
    unit.active = not unit.active
    db.session.commit()
    return unit


def delete_unit(unit_id):
    """Remove a unit and its seller links in one commit.

    Sales keep the unit's name. Returns True if a unit was removed.
    """
    unit = db.session.get(Unit, unit_id)
    if unit is None:
        return False

    UnitSellerLink.query.filter_by(unit_id=unit_id).delete()
    db.session.delete(unit)
    db.session.commit()
    logger.info(f"Unit {unit_id} deleted with its seller links")
    return True


# ─── Sellers ─────────────────────────────────────────────────────

def list_sellers(active_only=False):
    query = Seller.query
    if active_only:
        query = query.filter_by(active=True)
    return query.order_by(Seller.id).all()


def add_seller(name, email=None, phone=None, role="TeamMember"):
    """Create an active seller. Returns None for a blank or duplicate name."""
    name = (name or "").strip()
    if not name or _name_taken(Seller, name):
        logger.info(f"Ignored seller create: {name!r} is blank or already exists")
        return None

    seller = Seller(name=name, email=email, phone=phone, role=role, active=True)
    db.session.add(seller)
    db.session.commit()
    logger.info(f"Seller {seller.id} created: {name} ({role})")
    return seller


def update_seller(seller_id, name, email, phone, role):
    """Replace name, email, phone and role. The active flag is left as is."""
    seller = db.session.get(Seller, seller_id)
    if seller is None:
        return None
    seller.name = name
    seller.email = email
    seller.phone = phone
    seller.role = role
    db.session.commit()
    return seller


def toggle_seller_status(seller_id):
    seller = db.session.get(Seller, seller_id)
    if seller is None:
        return None
    seller.active = not seller.active
    db.session.commit()
    return seller


def delete_seller(seller_id):
    """Remove a seller. Unit links that mention it are kept."""
    seller = db.session.get(Seller, seller_id)
    if seller is None:
        return False
    db.session.delete(seller)
    db.session.commit()
    logger.info(f"Seller {seller_id} deleted")
    return True


# ─── Unit <-> seller links ───────────────────────────────────────

def get_unit_seller_links():
    """The link table as {unit_id: [seller_id, ...]}.

    Units without any linked seller are absent from the mapping.
    """
    links = {}
    rows = UnitSellerLink.query.order_by(
        UnitSellerLink.unit_id, UnitSellerLink.position
    ).all()
    for row in rows:
        links.setdefault(row.unit_id, []).append(row.seller_id)
    return links


def update_unit_seller_links(unit_id, seller_ids):
    """Replace the whole seller list of one unit. Duplicate ids are collapsed."""
    UnitSellerLink.query.filter_by(unit_id=unit_id).delete()
    for position, seller_id in enumerate(dict.fromkeys(seller_ids)):
        db.session.add(
            UnitSellerLink(unit_id=unit_id, seller_id=seller_id, position=position)
        )
    db.session.commit()
    logger.info(f"Unit {unit_id} linked sellers set to {list(dict.fromkeys(seller_ids))}")


def sellers_for_unit(unit_name):
    """Active sellers linked to the unit with this name (add-sale form choices)."""
    unit = Unit.query.filter_by(name=unit_name).first()
    if unit is None:
        return []
    linked_ids = get_unit_seller_links().get(unit.id, [])
    if not linked_ids:
        return []
    sellers = Seller.query.filter(Seller.id.in_(linked_ids), Seller.active.is_(True)).all()
    by_id = {s.id: s for s in sellers}
    return [by_id[i] for i in linked_ids if i in by_id]
