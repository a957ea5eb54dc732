"""Pipeline service — kanban columns, stage mapping, drag-and-drop moves.

A sale stores one of five canonical stages (Sale.STAGES). The board shows
seven columns. Three columns (ProposalPresented, Negotiation,
VerbalAgreement) all save as "Negotiation", so after a reload a card dropped
on ProposalPresented or VerbalAgreement shows up under Negotiation again.

Moving a card only changes the stage. Status is left alone.
"""

import logging

from salesdesk.extensions import db
from salesdesk.models.sale import Sale

logger = logging.getLogger(__name__)

# Board order, left to right.
BOARD_COLUMNS = [
    "Entry",
    "Qualification",
    "ProposalPresented",
    "Negotiation",
    "VerbalAgreement",
    "Won",
    "Lost",
]

# canonical stage -> column
STAGE_TO_COLUMN = {
    "Lead": "Entry",
    "Prospecting": "Qualification",
    "Negotiation": "Negotiation",
    "Closing": "Won",
    "Lost": "Lost",
}

# column -> canonical stage (used when a card is dropped)
COLUMN_TO_STAGE = {
    "Entry": "Lead",
    "Qualification": "Prospecting",
    "ProposalPresented": "Negotiation",
    "Negotiation": "Negotiation",
    "VerbalAgreement": "Negotiation",
    "Won": "Closing",
    "Lost": "Lost",
}

DRAG_SESSION_KEY = "dragging_sale_id"


def column_for(stage):
    """Column a sale with this stage is shown in.

    A stage that is literally a column name goes straight there; anything
    else goes through STAGE_TO_COLUMN. Unknown stages return None.
    """
    if stage in BOARD_COLUMNS:
        return stage
    return STAGE_TO_COLUMN.get(stage)


def stage_for(column):
    """Canonical stage saved when a card lands on `column`, or None if unknown."""
    return COLUMN_TO_STAGE.get(column)


def group_by_column(sales):
    """Bucket sales into board columns.

    Every column is present (possibly empty), in board order. Sales keep
    their input order inside a column.
    """
    board = {column: [] for column in BOARD_COLUMNS}
    for sale in sales:
        column = column_for(sale.stage)
        if column is not None:
            board[column].append(sale)
    return board


class DragToken:
    """The single "currently dragging" sale id, shared between drag-start and drop.

    Backed by any mutable mapping; the kanban blueprint passes the Flask
    session so the token survives between the two requests.
    """

    def __init__(self, store, key=DRAG_SESSION_KEY):
        self._store = store
        self._key = key

    @property
    def current(self):
        return self._store.get(self._key)

    def start(self, sale_id):
        self._store[self._key] = sale_id

    def consume(self):
        """Return the token and clear it."""
        return self._store.pop(self._key, None)


def drop_sale(token, sale_id, column):
    """Handle a card dropped on a column.

    The token is cleared whatever happens. The move is applied only when
    the token matches `sale_id`, the column is known and the sale exists.

    Args:
        token: DragToken for the current board session
        sale_id: id carried by the dropped card
        column: target column name

    Returns:
        Sale: the updated sale, or None if the drop was ignored.
    """
    dragging_id = token.consume()

    if dragging_id is None or dragging_id != sale_id:
        logger.info(f"Ignored drop of sale {sale_id}: drag token is {dragging_id}")
        return None

    new_stage = stage_for(column)
    if new_stage is None:
        logger.info(f"Ignored drop of sale {sale_id} on unknown column {column!r}")
        return None

    sale = db.session.get(Sale, sale_id)
    if sale is None:
        return None

    old_stage = sale.stage
    sale.stage = new_stage
    db.session.commit()
    logger.info(f"Sale {sale_id} moved {old_stage} -> {new_stage} (column {column})")
    return sale
