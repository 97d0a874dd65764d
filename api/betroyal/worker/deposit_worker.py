"""
Deposit Worker

Background service that expires manual-payment deposits nobody confirmed:
- Hourly: mark pending deposits older than PENDING_DEPOSIT_TTL_HOURS as failed

Uses APScheduler for job scheduling.
"""
import asyncio
import logging
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker

from betroyal.config import settings
from betroyal.services.ledger_service import LedgerService

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
)
logger = logging.getLogger('deposit_worker')


class DepositWorker:
    """Background worker for deposit housekeeping."""

    def __init__(self, database_url: str | None = None):
        self.engine = create_async_engine(database_url or settings.database_url, echo=False)
        self.async_session = async_sessionmaker(
            self.engine, expire_on_commit=False
        )
        self.scheduler = AsyncIOScheduler()

    async def start(self):
        """Start the worker and scheduler."""
        logger.info('Starting Deposit Worker...')

        # Every hour on the hour
        self.scheduler.add_job(
            self._expire_pending_deposits,
            CronTrigger(minute=0),
            id='expire_pending_deposits',
            name='Expire Stale Pending Deposits',
            replace_existing=True,
        )

        self.scheduler.start()
        logger.info('Scheduler started. Jobs:')
        for job in self.scheduler.get_jobs():
            logger.info(f'  - {job.name}: next run at {job.next_run_time}')

        # Keep running
        try:
            while True:
                await asyncio.sleep(60)
        except (KeyboardInterrupt, SystemExit, asyncio.CancelledError):
            logger.info('Shutting down...')
            self.scheduler.shutdown()
            await self.engine.dispose()

    async def _expire_pending_deposits(self) -> int:
        """Fail deposits still pending after the configured TTL."""
        logger.info('Expiring stale pending deposits...')
        try:
            async with self.async_session() as session:
                async with session.begin():
                    expired = await LedgerService(session).expire_pending_deposits()

            logger.info(f'Expired {expired} pending deposit(s)')
            return expired
        except Exception as e:
            logger.error(f'Deposit expiry failed: {e}', exc_info=True)
            raise

    async def run_once(self, job_type: str = 'expire'):
        """Run a single job immediately (for testing)."""
        if job_type == 'expire':
            return await self._expire_pending_deposits()
        else:
            raise ValueError(f'Unknown job type: {job_type}')


async def main():
    """Entry point for the worker."""
    worker = DepositWorker()
    await worker.start()


if __name__ == '__main__':
    asyncio.run(main())
