from typing import Any, Generic, TypeVar

from sqlalchemy import func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from country_api.core.database import Base

# Dialects whose INSERT supports ON CONFLICT DO UPDATE
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    def __init__(self, db: AsyncSession, model: type[ModelType]):
        self.db: AsyncSession = db
        self.model = model

    async def get(self, id: Any) -> ModelType | None:
        result = await self.db.get(self.model, id)
        return result

    async def remove(self, db_obj: ModelType) -> ModelType:
        await self.db.delete(db_obj)
        await self.db.commit()
        return db_obj

    async def upsert_values(self, values: dict[str, Any], index_elements: list[Any]) -> None:
        """Insert ``values`` or overwrite the row that conflicts on ``index_elements``.

        Runs as one statement; of two concurrent writes to the same key the later wins.
        """
        dialect = self.db.bind.dialect.name
        insert = _UPSERT_INSERTS.get(dialect)
        if insert is None:
            raise RuntimeError(f"Upsert is not supported for dialect '{dialect}'")

        key_names = {getattr(column, "key", column) for column in index_elements}
        update_values = {field: value for field, value in values.items() if field not in key_names}
        update_values["updated_at"] = func.now()

        statement = (
            insert(self.model)
            .values(**values)
            .on_conflict_do_update(index_elements=index_elements, set_=update_values)
        )
        await self.db.execute(statement)
        await self.db.commit()
