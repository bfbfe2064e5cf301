"""
Buyer Repository - Data Access Layer for Buyers
"""
from minimart.domain.buyer import Buyer
from minimart.repositories.base import TableRepository


class BuyerRepository(TableRepository[Buyer]):
    table = "buyers"
    model = Buyer
    columns = "id, full_name, email, phone, address, status, created_at"
