"""Kanban blueprint — /kanban/*

Sales pipeline board with drag-and-drop cards. Cards are sales; columns are
the seven board stages from pipeline_service.

The drag token lives in the Flask session: /api/drag stores the id of the
card being dragged, /api/drop consumes it. A drop is applied only if it
carries the same id.

Route Map:
  GET  /kanban/api/board                       — Board JSON (filterable)
  POST /kanban/api/sales                       — Add sale (validated)
  GET  /kanban/api/sales/<id>                  — Sale detail
  PUT  /kanban/api/sales/<id>                  — Save sale detail
  POST /kanban/api/drag                        — Start dragging a card
  POST /kanban/api/drop                        — Drop a card on a column
  GET  /kanban/api/units/<unit_name>/sellers   — Sellers linked to a unit
"""

from flask import Blueprint, jsonify, request, session

from salesdesk.decorators import json_object_required
from salesdesk.services import filter_service, pipeline_service, sales_service, team_service

kanban_bp = Blueprint("kanban", __name__, url_prefix="/kanban")


def _as_int(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


# ─── Board API ───────────────────────────────────────────────────

@kanban_bp.route("/api/board")
def api_board():
    filters = filter_service.SaleFilters.from_mapping(request.args)
    sales = filter_service.filter_sales(sales_service.list_sales(), filters)
    board = pipeline_service.group_by_column(sales)
    return jsonify([
        {
            "column": column,
            "count": len(cards),
            "cards": [_card_dict(s) for s in cards],
        }
        for column, cards in board.items()
    ])


# ─── Sale API ────────────────────────────────────────────────────

@kanban_bp.route("/api/sales", methods=["POST"])
@json_object_required
def api_create_sale():
    data = request.get_json(force=True)
    cleaned, errors = sales_service.validate_new_sale(
        data, sales_service.existing_phones()
    )
    if errors:
        return jsonify({"errors": errors}), 400
    sale = sales_service.add_sale(cleaned)
    return jsonify(sale.to_dict()), 201


@kanban_bp.route("/api/sales/<int:sale_id>")
def api_get_sale(sale_id):
    sale = sales_service.get_sale(sale_id)
    if not sale:
        return jsonify({"error": "Sale not found"}), 404
    return jsonify(sale.to_dict())


@kanban_bp.route("/api/sales/<int:sale_id>", methods=["PUT"])
@json_object_required
def api_update_sale(sale_id):
    data = request.get_json(force=True)
    data["id"] = sale_id
    cleaned, errors = sales_service.validate_sale_update(data)
    if errors:
        return jsonify({"errors": errors}), 400
    sale = sales_service.update_sale(cleaned)
    if not sale:
        return jsonify({"error": "Sale not found"}), 404
    return jsonify(sale.to_dict())


# ─── Drag and drop ───────────────────────────────────────────────

@kanban_bp.route("/api/drag", methods=["POST"])
@json_object_required
def api_drag_start():
    data = request.get_json(force=True)
    sale_id = _as_int(data.get("sale_id"))
    if sale_id is None:
        return jsonify({"error": "sale_id is required"}), 400
    pipeline_service.DragToken(session).start(sale_id)
    return jsonify({"dragging": sale_id})


@kanban_bp.route("/api/drop", methods=["POST"])
@json_object_required
def api_drop():
    data = request.get_json(force=True)
    column = data.get("column")
    if not isinstance(column, str):
        column = None  # unknown column, still clears the token
    token = pipeline_service.DragToken(session)
    sale = pipeline_service.drop_sale(token, _as_int(data.get("sale_id")), column)
    if sale is None:
        return jsonify({"moved": False})
    return jsonify({
        "moved": True,
        "sale": _card_dict(sale),
    })


# ─── Form helpers ────────────────────────────────────────────────

@kanban_bp.route("/api/units/<unit_name>/sellers")
def api_unit_sellers(unit_name):
    sellers = team_service.sellers_for_unit(unit_name)
    return jsonify([s.to_dict() for s in sellers])


# ─── Helpers ─────────────────────────────────────────────────────

def _card_dict(sale):
    """Serialize a sale as a board card."""
    card = sale.to_dict()
    card["column"] = pipeline_service.column_for(sale.stage)
    return card
