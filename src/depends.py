from fastapi import Depends
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.repositories.customer_repository import SqlAlchemyCustomerRepository
from src.adapter.repositories.setting_repository import SqlAlchemySettingRepository
from src.adapter.services.audit_service import create_audit_service
from src.app.services.audit_service import AuditService
from src.app.services.unit_price_resolver import UnitPriceResolver

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


def get_audit_service(session: AsyncSession = Depends(get_session)) -> AuditService:
    return create_audit_service(
        session=session,
        webhook_url=ApplicationConfig.AUDIT_WEBHOOK_URL,
        persist=ApplicationConfig.AUDIT_LOG_ENABLED,
    )


def get_price_resolver(session: AsyncSession = Depends(get_session)) -> UnitPriceResolver:
    return UnitPriceResolver(
        SqlAlchemySettingRepository(session),
        customer_repo=SqlAlchemyCustomerRepository(session),
        setting_key=ApplicationConfig.UNIT_PRICE_SETTING_KEY,
    )
