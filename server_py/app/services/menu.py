from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.menu import MenuItem, MenuVersion


def _effective_at(moment: datetime):
    return and_(
        MenuVersion.effective_from <= moment,
        or_(MenuVersion.effective_to.is_(None), MenuVersion.effective_to > moment),
    )


class MenuService:
    """Чтение действующего меню трака."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def find_available_item(
        self,
        truck_id: str,
        item_id: str,
        at: Optional[datetime] = None,
    ) -> Optional[MenuItem]:
        moment = at or datetime.utcnow()
        result = await self.db.execute(
            select(MenuItem)
            .join(MenuVersion, MenuItem.menu_id == MenuVersion.menu_id)
            .where(
                MenuItem.item_id == item_id,
                MenuVersion.truck_id == truck_id,
                MenuItem.available.is_(True),
                _effective_at(moment),
            )
            .limit(1)
        )
        return result.scalars().first()

    async def current_items(self, truck_id: str, at: Optional[datetime] = None) -> List[MenuItem]:
        moment = at or datetime.utcnow()
        result = await self.db.execute(
            select(MenuItem)
            .join(MenuVersion, MenuItem.menu_id == MenuVersion.menu_id)
            .where(MenuVersion.truck_id == truck_id, _effective_at(moment))
            .order_by(MenuVersion.effective_from.desc(), MenuItem.name)
        )
        return list(result.scalars())


def serialize_menu_item(item: MenuItem) -> dict:
    return {
        "item_id": item.item_id,
        "name": item.name,
        "description": item.description,
        "price": float(item.price),
        "dietary_tags": item.dietary_tags or [],
        "available": item.available,
    }
