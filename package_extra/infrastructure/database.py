from typing import Any, Dict, Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.dialects.postgresql import insert, JSONB
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import Table, Column, String, DateTime, MetaData, text, select, delete

from package_extra.domain.models import AggregatedRecord, ExtraField
from package_extra.domain.exceptions import DatabaseException

# SQLAlchemy core Table definitions
metadata = MetaData()
extras_table = Table(
    'package_extras', metadata,
    Column('field', String, primary_key=True),
    Column('package_name', String, primary_key=True),
    Column('value', JSONB, nullable=False),
    Column('updated_at', DateTime(timezone=True), server_default=text('NOW()')),
)
aggregated_table = Table(
    'package_extras_aggregated', metadata,
    Column('package_name', String, primary_key=True),
    Column('data', JSONB, nullable=False),
    Column('aggregated_at', DateTime(timezone=True), server_default=text('NOW()')),
)


class PackageExtraRepository:
    """
    Key-value store for package extra data, backed by PostgreSQL.
    Fields are keyed by (field, package name); the aggregated collection
    is only ever replaced as a whole.
    """

    def __init__(self, db_url: str):
        self.engine = create_async_engine(db_url, echo=False)

    async def close(self) -> None:
        await self.engine.dispose()

    async def create_schema(self) -> None:
        """Creates the tables if they don't exist yet."""
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(metadata.create_all)
        except SQLAlchemyError as e:
            raise DatabaseException(f"Failed to create schema: {e}") from e

    async def get_field(self, field: ExtraField, package_name: str) -> Optional[Any]:
        """
        Reads one stored field.

        Returns:
            The stored value, or None if the field was never written.
        """
        stmt = select(extras_table.c.value).where(
            extras_table.c.field == field.value,
            extras_table.c.package_name == package_name,
        )
        try:
            async with self.engine.connect() as conn:
                result = await conn.execute(stmt)
                return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise DatabaseException(f"Failed to read {field.value} of {package_name}: {e}") from e

    async def set_field(self, field: ExtraField, package_name: str, value: Any) -> None:
        """Writes one field, overwriting any previous value."""
        stmt = insert(extras_table).values(
            field=field.value,
            package_name=package_name,
            value=value,
        )
        upsert_stmt = stmt.on_conflict_do_update(
            index_elements=['field', 'package_name'],
            set_={
                'value': stmt.excluded.value,
                'updated_at': text('NOW()'),
            },
        )
        try:
            async with self.engine.begin() as conn:
                await conn.execute(upsert_stmt)
        except SQLAlchemyError as e:
            raise DatabaseException(f"Failed to write {field.value} of {package_name}: {e}") from e

    async def set_aggregated(self, records: Dict[str, AggregatedRecord]) -> None:
        """
        Replaces the whole aggregated collection in a single transaction.
        Packages missing from ``records`` are removed.
        """
        values = [
            {'package_name': name, 'data': record.model_dump()}
            for name, record in records.items()
        ]
        try:
            async with self.engine.begin() as conn:
                await conn.execute(delete(aggregated_table))
                if values:
                    await conn.execute(insert(aggregated_table).values(values))
        except SQLAlchemyError as e:
            raise DatabaseException(f"Failed to replace aggregated extra data: {e}") from e

    async def get_aggregated(self) -> Dict[str, AggregatedRecord]:
        stmt = select(aggregated_table.c.package_name, aggregated_table.c.data)
        try:
            async with self.engine.connect() as conn:
                result = await conn.execute(stmt)
                rows = result.all()
        except SQLAlchemyError as e:
            raise DatabaseException(f"Failed to read aggregated extra data: {e}") from e
        return {row.package_name: AggregatedRecord(**row.data) for row in rows}
