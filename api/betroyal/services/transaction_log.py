"""Transaction log — append-only record of balance-affecting events."""
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from betroyal.models.transaction import Transaction, TransactionType, TransactionStatus


class TransactionLog:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def append(
        self,
        user_id: int,
        amount: int,
        kind: TransactionType,
        method: str | None = None,
        status: TransactionStatus = TransactionStatus.COMPLETED,
        notes: str | None = None,
    ) -> Transaction:
        """Record one event. Amount is the unsigned magnitude; status is caller intent."""
        entry = Transaction(
            user_id=user_id,
            amount=abs(amount),
            type=kind.value,
            method=method,
            status=status.value,
            notes=notes,
        )
        self.db.add(entry)
        await self.db.flush()
        await self.db.refresh(entry)
        return entry

    async def get(self, transaction_id: int) -> Transaction | None:
        return await self.db.get(Transaction, transaction_id)

    async def list_all(self) -> list[Transaction]:
        """All transactions, insertion order."""
        result = await self.db.execute(select(Transaction).order_by(Transaction.id))
        return list(result.scalars().all())

    async def list_for_user(self, user_id: int) -> list[Transaction]:
        """One user's transactions, insertion order."""
        result = await self.db.execute(
            select(Transaction)
            .where(Transaction.user_id == user_id)
            .order_by(Transaction.id)
        )
        return list(result.scalars().all())

    async def list_pending_deposits(self, older_than: datetime | None = None) -> list[Transaction]:
        query = select(Transaction).where(
            Transaction.type == TransactionType.DEPOSIT.value,
            Transaction.status == TransactionStatus.PENDING.value,
        )
        if older_than is not None:
            query = query.where(Transaction.created_at < older_than)
        result = await self.db.execute(query.order_by(Transaction.id))
        return list(result.scalars().all())

    async def transition(
        self,
        transaction_id: int,
        from_status: TransactionStatus,
        to_status: TransactionStatus,
    ) -> Transaction | None:
        """Move a row from one status to another in a single conditional UPDATE.

        Returns the refreshed row, or None when it was not in from_status.
        """
        result = await self.db.execute(
            update(Transaction)
            .where(
                Transaction.id == transaction_id,
                Transaction.status == from_status.value,
            )
            .values(status=to_status.value)
            .returning(Transaction.id)
            .execution_options(synchronize_session=False)
        )
        if result.scalar_one_or_none() is None:
            return None
        return await self.db.get(Transaction, transaction_id, populate_existing=True)
