"""Demo fixture loaded once when the app starts (SEED_DEMO_DATA).

SALES is listed newest first, the way the sales table shows it. Rows are
inserted oldest first so that id order matches that listing.
"""

import logging
from datetime import date

from salesdesk.extensions import db
from salesdesk.models.sale import Sale
from salesdesk.models.seller import Seller
from salesdesk.models.unit import Unit, UnitSellerLink

logger = logging.getLogger(__name__)

UNITS = [
    {"id": 1, "name": "São Paulo"},
    {"id": 2, "name": "Rio de Janeiro"},
    {"id": 3, "name": "Belo Horizonte"},
    {"id": 4, "name": "Porto Alegre"},
    {"id": 5, "name": "Curitiba"},
]

SELLERS = [
    {"id": 1, "name": "Ana Silva", "role": "Manager",
     "email": "ana.silva@empresa.com.br", "phone": "(11) 99999-0001"},
    {"id": 2, "name": "Bruno Costa", "role": "TeamMember",
     "email": "bruno.costa@empresa.com.br", "phone": "(21) 99999-0002"},
    {"id": 3, "name": "Cláudia Martins", "role": "TeamMember",
     "email": "claudia.martins@empresa.com.br", "phone": "(31) 99999-0003"},
    {"id": 4, "name": "Daniel Almeida", "role": "TeamMember",
     "email": "daniel.almeida@empresa.com.br", "phone": "(51) 99999-0004"},
    {"id": 5, "name": "Eduardo Lima", "role": "Master",
     "email": "eduardo.lima@empresa.com.br", "phone": "(41) 99999-0005"},
]

UNIT_SELLER_LINKS = {
    1: [1, 3],
    2: [2],
    3: [3],
    4: [4],
    5: [5],
}

SALES = [
    {"registered_on": "2025-06-12", "unit_name": "São Paulo", "seller_name": "Ana Silva",
     "customer_name": "Marcos Pereira", "phone": "(11) 98765-4321", "category": "Product A",
     "source": "Website", "status": "Active", "stage": "Lead",
     "initial_value": 1200, "sale_value": 0},
    {"registered_on": "2025-06-10", "unit_name": "Rio de Janeiro", "seller_name": "Bruno Costa",
     "customer_name": "Juliana Rocha", "phone": "(21) 97654-3210", "category": "Service X",
     "source": "Referral", "status": "Active", "stage": "Prospecting",
     "initial_value": 3000, "sale_value": 3500, "rating": 4, "city": "Rio de Janeiro"},
    {"registered_on": "2025-06-08", "unit_name": "Belo Horizonte", "seller_name": "Cláudia Martins",
     "customer_name": "Ricardo Alves", "phone": "(31) 96543-2109", "category": "Product B",
     "source": "TradeShow", "status": "Active", "stage": "Negotiation",
     "initial_value": 5000, "sale_value": 4800, "expected_close_on": "2025-07-15"},
    {"registered_on": "2025-06-05", "unit_name": "São Paulo", "seller_name": "Cláudia Martins",
     "customer_name": "Fernanda Souza", "phone": "(11) 95432-1098", "category": "Service Y",
     "source": "Ad", "status": "Closed", "stage": "Closing",
     "initial_value": 7000, "sale_value": 7500, "rating": 5},
    {"registered_on": "2025-06-03", "unit_name": "Porto Alegre", "seller_name": "Daniel Almeida",
     "customer_name": "Gustavo Ribeiro", "phone": "(51) 94321-0987", "category": "Product A",
     "source": "Website", "status": "Lost", "stage": "Lost",
     "initial_value": 2500, "sale_value": 2500},
    {"registered_on": "2025-05-28", "unit_name": "Curitiba", "seller_name": "Eduardo Lima",
     "customer_name": "Patrícia Gomes", "phone": "(41) 93210-9876", "category": "Service X",
     "source": "Referral", "status": "Closed", "stage": "Closing",
     "initial_value": 4000, "sale_value": 4200},
    {"registered_on": "2025-05-21", "unit_name": "São Paulo", "seller_name": "Ana Silva",
     "customer_name": "Roberto Nunes", "phone": "(11) 92109-8765", "category": "Product B",
     "source": "TradeShow", "status": "Closed", "stage": "Closing",
     "initial_value": 6000, "sale_value": 6300, "city": "São Paulo"},
    {"registered_on": "2025-05-14", "unit_name": "Rio de Janeiro", "seller_name": "Bruno Costa",
     "customer_name": "Camila Duarte", "phone": "(21) 91098-7654", "category": "Product A",
     "source": "Ad", "status": "Active", "stage": "Lead",
     "initial_value": 900, "sale_value": 0},
    {"registered_on": "2025-05-07", "unit_name": "Belo Horizonte", "seller_name": "Cláudia Martins",
     "customer_name": "Lucas Barros", "phone": "(31) 90987-6543", "category": "Service Y",
     "source": "Website", "status": "Lost", "stage": "Lost",
     "initial_value": 3200, "sale_value": 3000},
    {"registered_on": "2025-04-30", "unit_name": "Porto Alegre", "seller_name": "Daniel Almeida",
     "customer_name": "Aline Castro", "phone": "(51) 99876-5432", "category": "Service X",
     "source": "Referral", "status": "Closed", "stage": "Closing",
     "initial_value": 5500, "sale_value": 5800},
    {"registered_on": "2025-04-18", "unit_name": "Curitiba", "seller_name": "Eduardo Lima",
     "customer_name": "Thiago Moreira", "phone": "(41) 98765-1234", "category": "Product B",
     "source": "TradeShow", "status": "Active", "stage": "Negotiation",
     "initial_value": 8000, "sale_value": 0},
    {"registered_on": "2025-04-09", "unit_name": "São Paulo", "seller_name": "Ana Silva",
     "customer_name": "Marcos Pereira", "phone": "(11) 97654-1234", "category": "Service X",
     "source": "Website", "status": "Closed", "stage": "Closing",
     "initial_value": 2000, "sale_value": 2200},
]


def _sale_row(data):
    values = dict(data)
    values["registered_on"] = date.fromisoformat(values["registered_on"])
    if "expected_close_on" in values:
        values["expected_close_on"] = date.fromisoformat(values["expected_close_on"])
    return Sale(**values)


def seed_demo_data():
    """Load units, sellers, links and sample sales into an empty store.

    Does nothing if any unit already exists.
    """
    if Unit.query.first() is not None:
        return False

    for unit in UNITS:
        db.session.add(Unit(active=True, **unit))
    for seller in SELLERS:
        db.session.add(Seller(active=True, **seller))
    for unit_id, seller_ids in UNIT_SELLER_LINKS.items():
        for position, seller_id in enumerate(seller_ids):
            db.session.add(
                UnitSellerLink(unit_id=unit_id, seller_id=seller_id, position=position)
            )
    for sale in reversed(SALES):
        db.session.add(_sale_row(sale))

    db.session.commit()
    logger.info(
        f"Seeded {len(UNITS)} units, {len(SELLERS)} sellers, {len(SALES)} sales"
    )
    return True
