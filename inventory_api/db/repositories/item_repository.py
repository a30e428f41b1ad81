"""
Item repository - item data access, filtering and aggregate queries.
"""

from sqlalchemy import case, func, or_, select, update

from inventory_api.db.models.item import Item
from inventory_api.db.repositories.base_repository import BaseRepository

SORTABLE_FIELDS = {"name", "created_at", "updated_at", "quantity", "price", "min_level"}


class ItemRepository(BaseRepository[Item]):
    """Item-specific queries, always scoped to the owning user."""

    def __init__(self, session):
        super().__init__(session, Item)

    @staticmethod
    def filters(
        user_id: str,
        *,
        folder_id: str | None = None,
        root_only: bool = False,
        search: str | None = None,
        low_stock: bool = False,
    ) -> list:
        """Build WHERE conditions for the list endpoint."""
        conditions = [Item.user_id == user_id]
        if root_only:
            conditions.append(Item.folder_id.is_(None))
        elif folder_id:
            conditions.append(Item.folder_id == folder_id)
        if search:
            pattern = f"%{search.lower()}%"
            conditions.append(
                or_(
                    func.lower(Item.name).like(pattern),
                    func.lower(func.coalesce(Item.description, "")).like(pattern),
                    func.lower(func.coalesce(Item.sku, "")).like(pattern),
                )
            )
        if low_stock:
            conditions.append(Item.quantity <= Item.min_level)
        return conditions

    @staticmethod
    def order(sort_by: str | None):
        """'field:asc|desc' -> ORDER BY clause. Unknown fields fall back to newest first."""
        if sort_by:
            field, _, direction = sort_by.partition(":")
            if field in SORTABLE_FIELDS:
                column = getattr(Item, field)
                return column.desc() if direction == "desc" else column.asc()
        return Item.created_at.desc()

    async def list_by_ids(self, user_id: str, ids: list[str]) -> list[Item]:
        if not ids:
            return []
        return await self.find(Item.user_id == user_id, Item.id.in_(ids), limit=None)

    async def list_all_for_user(self, user_id: str) -> list[Item]:
        return await self.find(Item.user_id == user_id, limit=None)

    async def get_by_barcode(self, user_id: str, barcode: str) -> Item | None:
        result = await self.session.execute(
            select(Item).where(Item.user_id == user_id, Item.barcode == barcode).limit(1)
        )
        return result.scalar_one_or_none()

    async def increment_quantity(self, id: str, user_id: str, change: int) -> int | None:
        """
        Atomically add change to quantity and return the new value.
        Returns None when the item is missing or the result would be negative,
        so concurrent updates can never lose a write or go below zero.
        """
        stmt = (
            update(Item)
            .where(Item.id == id, Item.user_id == user_id, Item.quantity + change >= 0)
            .values(quantity=Item.quantity + change)
            .returning(Item.quantity)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def count_in_folder(self, folder_id: str) -> int:
        return await self.count(Item.folder_id == folder_id)

    async def stats(self, user_id: str) -> dict:
        """Aggregate counts and totals for the dashboard."""
        stmt = select(
            func.count(Item.id),
            func.coalesce(func.sum(Item.quantity), 0),
            func.coalesce(func.sum(Item.quantity * Item.price), 0),
            func.coalesce(func.sum(case((Item.quantity <= Item.min_level, 1), else_=0)), 0),
            func.coalesce(func.sum(case((Item.quantity == 0, 1), else_=0)), 0),
        ).where(Item.user_id == user_id)
        row = (await self.session.execute(stmt)).one()
        return {
            "total_items": int(row[0]),
            "total_quantity": int(row[1]),
            "total_value": round(float(row[2]), 2),
            "low_stock_count": int(row[3]),
            "out_of_stock_count": int(row[4]),
        }

    async def items_with_any_tag(self, user_id: str, tags: list[str]) -> list[Item]:
        """Tags are a JSON list; filter in Python to stay portable across backends."""
        wanted = set(tags)
        items = await self.list_all_for_user(user_id)
        return [i for i in items if wanted.intersection(i.tags or [])]

