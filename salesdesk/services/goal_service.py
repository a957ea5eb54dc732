"""Goal service — the monthly revenue target.

One process-wide value. Until someone sets it, the configured
DEFAULT_MONTHLY_GOAL applies.
"""

import logging

from flask import current_app

from salesdesk.extensions import db
from salesdesk.models.settings import SalesSettings

logger = logging.getLogger(__name__)

SETTINGS_ROW_ID = 1


def _settings_row():
    row = db.session.get(SalesSettings, SETTINGS_ROW_ID)
    if row is None:
        row = SalesSettings(
            id=SETTINGS_ROW_ID,
            monthly_goal=current_app.config["DEFAULT_MONTHLY_GOAL"],
        )
        db.session.add(row)
        db.session.flush()
    return row


def get_monthly_goal():
    return _settings_row().monthly_goal


def set_monthly_goal(value):
    """Replace the monthly goal unconditionally."""
    row = _settings_row()
    old_value = row.monthly_goal
    row.monthly_goal = value
    db.session.commit()
    logger.info(f"Monthly goal changed {old_value} -> {value}")
    return row.monthly_goal
