"""Settings blueprint — /settings/*

Admin screens: units, sellers, unit/seller distribution, monthly goal.
Deletes must be confirmed by the caller (@confirmation_required).

Route Map:
  GET    /settings/api/units                  — List units
  POST   /settings/api/units                  — Add unit
  PUT    /settings/api/units/<id>             — Rename unit
  POST   /settings/api/units/<id>/toggle      — Toggle active flag
  DELETE /settings/api/units/<id>             — Delete unit (+ its links)
  GET    /settings/api/sellers                — List sellers
  POST   /settings/api/sellers                — Add seller
  PUT    /settings/api/sellers/<id>           — Update seller
  POST   /settings/api/sellers/<id>/toggle    — Toggle active flag
  DELETE /settings/api/sellers/<id>           — Delete seller
  GET    /settings/api/links                  — Unit -> seller ids
  PUT    /settings/api/links/<unit_id>        — Replace a unit's sellers
  GET    /settings/api/goal                   — Monthly goal
  PUT    /settings/api/goal                   — Set monthly goal
"""

from flask import Blueprint, jsonify, request

from salesdesk.decorators import confirmation_required, json_object_required
from salesdesk.models.seller import Seller
from salesdesk.services import goal_service, team_service
from salesdesk.services.sales_service import parse_money

settings_bp = Blueprint("settings", __name__, url_prefix="/settings")


# ══════════════════════════════════════════════
#  UNITS
# ══════════════════════════════════════════════

@settings_bp.route("/api/units")
def api_units():
    return jsonify([u.to_dict() for u in team_service.list_units()])


@settings_bp.route("/api/units", methods=["POST"])
@json_object_required
def api_create_unit():
    data = request.get_json(force=True)
    name = str(data.get("name") or "").strip()
    if not name:
        return jsonify({"errors": {"name": "Unit name is required."}}), 400

    unit = team_service.add_unit(name)
    if unit is None:
        return jsonify({"error": f"Unit '{name}' already exists."}), 409
    return jsonify(unit.to_dict()), 201


@settings_bp.route("/api/units/<int:unit_id>", methods=["PUT"])
@json_object_required
def api_update_unit(unit_id):
    data = request.get_json(force=True)
    name = str(data.get("name") or "").strip()
    if not name:
        return jsonify({"errors": {"name": "Unit name is required."}}), 400

    unit = team_service.update_unit(unit_id, name)
    if unit is None:
        return jsonify({"error": "Unit not found"}), 404
    return jsonify(unit.to_dict())


@settings_bp.route("/api/units/<int:unit_id>/toggle", methods=["POST"])
def api_toggle_unit(unit_id):
    unit = team_service.toggle_unit_status(unit_id)
    if unit is None:
        return jsonify({"error": "Unit not found"}), 404
    return jsonify(unit.to_dict())


@settings_bp.route("/api/units/<int:unit_id>", methods=["DELETE"])
@confirmation_required
def api_delete_unit(unit_id):
    team_service.delete_unit(unit_id)
    return jsonify({"success": True})


# ══════════════════════════════════════════════
#  SELLERS
# ══════════════════════════════════════════════

def _seller_form(data):
    """Validate a seller payload. Returns (values, errors)."""
    errors = {}
    values = {
        "name": str(data.get("name") or "").strip(),
        "email": str(data.get("email") or "").strip() or None,
        "phone": str(data.get("phone") or "").strip() or None,
        "role": str(data.get("role") or "TeamMember").strip(),
    }
    if not values["name"]:
        errors["name"] = "Seller name is required."
    if values["role"] not in Seller.ROLES:
        errors["role"] = f"Role must be one of: {', '.join(Seller.ROLES)}"
    return values, errors


@settings_bp.route("/api/sellers")
def api_sellers():
    return jsonify([s.to_dict() for s in team_service.list_sellers()])


@settings_bp.route("/api/sellers", methods=["POST"])
@json_object_required
def api_create_seller():
    values, errors = _seller_form(request.get_json(force=True))
    if errors:
        return jsonify({"errors": errors}), 400

    seller = team_service.add_seller(**values)
    if seller is None:
        return jsonify({"error": f"Seller '{values['name']}' already exists."}), 409
    return jsonify(seller.to_dict()), 201


@settings_bp.route("/api/sellers/<int:seller_id>", methods=["PUT"])
@json_object_required
def api_update_seller(seller_id):
    values, errors = _seller_form(request.get_json(force=True))
    if errors:
        return jsonify({"errors": errors}), 400

    seller = team_service.update_seller(seller_id, **values)
    if seller is None:
        return jsonify({"error": "Seller not found"}), 404
    return jsonify(seller.to_dict())


@settings_bp.route("/api/sellers/<int:seller_id>/toggle", methods=["POST"])
def api_toggle_seller(seller_id):
    seller = team_service.toggle_seller_status(seller_id)
    if seller is None:
        return jsonify({"error": "Seller not found"}), 404
    return jsonify(seller.to_dict())


@settings_bp.route("/api/sellers/<int:seller_id>", methods=["DELETE"])
@confirmation_required
def api_delete_seller(seller_id):
    team_service.delete_seller(seller_id)
    return jsonify({"success": True})


# ══════════════════════════════════════════════
#  DISTRIBUTION (unit <-> seller links)
# ══════════════════════════════════════════════

@settings_bp.route("/api/links")
def api_links():
    links = team_service.get_unit_seller_links()
    # JSON object keys are strings
    return jsonify({str(unit_id): ids for unit_id, ids in links.items()})


@settings_bp.route("/api/links/<int:unit_id>", methods=["PUT"])
@json_object_required
def api_update_links(unit_id):
    data = request.get_json(force=True)
    seller_ids = data.get("seller_ids")
    if not isinstance(seller_ids, list) or not all(
        isinstance(i, int) and not isinstance(i, bool) for i in seller_ids
    ):
        return jsonify({"errors": {"seller_ids": "Expected a list of seller ids."}}), 400

    team_service.update_unit_seller_links(unit_id, seller_ids)
    return jsonify({
        "unit_id": unit_id,
        "seller_ids": team_service.get_unit_seller_links().get(unit_id, []),
    })


# ══════════════════════════════════════════════
#  GOALS
# ══════════════════════════════════════════════

@settings_bp.route("/api/goal")
def api_goal():
    return jsonify({"monthly_goal": goal_service.get_monthly_goal()})


@settings_bp.route("/api/goal", methods=["PUT"])
@json_object_required
def api_set_goal():
    data = request.get_json(force=True)
    value = parse_money(data.get("monthly_goal"))
    if value is None:
        return jsonify({"errors": {"monthly_goal": "Enter a number."}}), 400
    if value < 0:
        return jsonify({"errors": {"monthly_goal": "Goal cannot be negative."}}), 400

    return jsonify({"monthly_goal": goal_service.set_monthly_goal(value)})
