"""Sales settings — process-wide values edited from the settings screen.

A single row. Currently only the monthly revenue goal.
"""

from salesdesk.extensions import db


class SalesSettings(db.Model):
    __tablename__ = "sales_settings"

    id = db.Column(db.Integer, primary_key=True)
    monthly_goal = db.Column(
        db.Numeric(12, 2, asdecimal=False), nullable=False, default=0
    )

    def __repr__(self):
        return f"<SalesSettings goal={self.monthly_goal}>"
