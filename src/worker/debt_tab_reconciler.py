"""Debt Tab Reconciliation Background Worker

Periodically replays each tab's transaction log and reports tabs whose
stored balances disagree with it. Can be run as a standalone script or
integrated with a scheduler.
"""

import asyncio
import logging
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories.debt_tab_repository import SqlAlchemyDebtTabRepository
from src.adapter.repositories.debt_transaction_repository import SqlAlchemyDebtTransactionRepository
from src.app.use_cases.debts import DebtReconciliationResultDTO, ReconcileDebtTabs
from src.domain.base import utcnow

logger = logging.getLogger(__name__)


class DebtTabReconcilerWorker:
    """
    Background worker for debt tab reconciliation

    Usage:
        # Run once
        worker = DebtTabReconcilerWorker()
        result = await worker.run_once()

        # Run continuously
        await worker.run_forever(interval_seconds=86400)
    """

    def __init__(self, db_uri: Optional[str] = None, enabled: Optional[bool] = None):
        self.db_uri = db_uri or ApplicationConfig.DB_URI
        self.enabled = ApplicationConfig.RECONCILIATION_ENABLED if enabled is None else enabled

        self.engine = create_async_engine(self.db_uri, echo=False, future=True)
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

        logger.info("DebtTabReconcilerWorker initialized")

    async def run_once(self) -> DebtReconciliationResultDTO:
        if not self.enabled:
            logger.info("Debt tab reconciliation is disabled, skipping")
            return DebtReconciliationResultDTO(
                total_tabs_checked=0,
                discrepancies_found=0,
                discrepancies=[],
                reconciliation_time=utcnow(),
                execution_time_ms=0,
            )

        async with self.async_session_factory() as session:
            use_case = ReconcileDebtTabs(
                tab_repo=SqlAlchemyDebtTabRepository(session),
                transaction_repo=SqlAlchemyDebtTransactionRepository(session),
            )

            result = await use_case.execute()

            if result.is_err():
                logger.error(f"Reconciliation failed: {result.error.message}")
                raise RuntimeError(f"Reconciliation failed: {result.error.message}")

            response = result.value

            if response.discrepancies_found > 0:
                logger.error(
                    f"ALERT: {response.discrepancies_found} debt tab discrepancies found!"
                )

            return response

    async def run_forever(self, interval_seconds: Optional[int] = None):
        interval_seconds = interval_seconds or ApplicationConfig.RECONCILIATION_INTERVAL_SECONDS
        logger.info(
            f"Starting continuous debt tab reconciliation with {interval_seconds}s interval"
        )

        while True:
            try:
                result = await self.run_once()
                logger.info(
                    f"Reconciliation cycle complete. "
                    f"Checked {result.total_tabs_checked} tabs, "
                    f"found {result.discrepancies_found} discrepancies "
                    f"in {result.execution_time_ms}ms"
                )
            except Exception as e:
                logger.error(f"Reconciliation cycle failed: {e}")

            await asyncio.sleep(interval_seconds)

    async def shutdown(self):
        """Cleanup resources"""
        await self.engine.dispose()
        logger.info("DebtTabReconcilerWorker shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        python -m src.worker.debt_tab_reconciler --once
        python -m src.worker.debt_tab_reconciler --interval 3600
    """
    import argparse

    logging.basicConfig(
        level=getattr(logging, str(ApplicationConfig.LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Debt Tab Reconciliation Worker")
    parser.add_argument("--once", action="store_true", help="Run once and exit")
    parser.add_argument(
        "--interval", type=int, default=None,
        help="Interval between runs in seconds (default: RECONCILIATION_INTERVAL_SECONDS)"
    )
    args = parser.parse_args()

    worker = DebtTabReconcilerWorker()

    try:
        if args.once:
            result = await worker.run_once()
            print("Reconciliation complete:")
            print(f"  Total tabs checked: {result.total_tabs_checked}")
            print(f"  Discrepancies found: {result.discrepancies_found}")
            print(f"  Execution time: {result.execution_time_ms}ms")
            for d in result.discrepancies:
                print(
                    f"  - Tab {d.tab_id} (customer {d.customer_id}): {d.issue}, "
                    f"stored={d.tab_balance}, replayed={d.replayed_balance}"
                )
        else:
            await worker.run_forever(interval_seconds=args.interval)
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
