"""Shared fixtures: a throwaway SQLite database per test and an HTTP client."""

from datetime import datetime, timedelta
from decimal import Decimal
from pathlib import Path

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import sessionmaker

from app.core.database import Base, get_db, make_engine
from app.core.init_db import init_db  # noqa: F401  registers every model on Base.metadata
from app.models.food_truck import FoodTruck
from app.models.menu import MenuItem, MenuVersion


@pytest.fixture
async def session_factory(tmp_path: Path):
    engine = make_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


async def _add_truck(
    db: AsyncSession,
    truck_id: str = "t1",
    items=(("burger", "Burger", "8.50", True),),
    effective_from: datetime | None = None,
    effective_to: datetime | None = None,
    **truck_fields,
) -> FoodTruck:
    """Insert a truck with one menu version holding the given items."""
    truck = FoodTruck(truck_id=truck_id, name=truck_fields.pop("name", f"Truck {truck_id}"), **truck_fields)
    menu = MenuVersion(
        menu_id=f"menu_{truck_id}",
        effective_from=effective_from or datetime.utcnow() - timedelta(days=1),
        effective_to=effective_to,
    )
    for item_id, name, price, available in items:
        menu.items.append(MenuItem(item_id=item_id, name=name, price=Decimal(price), available=available))
    truck.menus.append(menu)
    db.add(truck)
    await db.commit()
    return truck


@pytest.fixture
def make_truck(db):
    async def make(truck_id: str = "t1", **kwargs) -> FoodTruck:
        return await _add_truck(db, truck_id, **kwargs)

    return make


@pytest.fixture
async def client(session_factory):
    from app.main import app

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client
    app.dependency_overrides.clear()
