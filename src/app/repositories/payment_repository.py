"""Payment Repository Interface"""

from abc import abstractmethod
from typing import List

from src.app.repositories.base import EntityRepository
from src.domain.payment import Payment, PaymentCreate, PaymentUpdate


class PaymentRepository(EntityRepository[Payment, PaymentCreate, PaymentUpdate]):
    """
    Repository interface for Payment persistence

    Creating, updating or deleting a payment recomputes the parent invoice.
    """

    @abstractmethod
    async def list_by_invoice(self, invoice_id: str) -> List[Payment]:
        pass
