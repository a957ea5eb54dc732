# Models package — import all models here so create_all() can discover them.

from salesdesk.models.sale import Sale  # noqa: F401
from salesdesk.models.unit import Unit, UnitSellerLink  # noqa: F401
from salesdesk.models.seller import Seller  # noqa: F401
from salesdesk.models.settings import SalesSettings  # noqa: F401
