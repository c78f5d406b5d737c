from __future__ import annotations

import logging

import sqlalchemy
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from models.records import Measurement

logger = logging.getLogger(__name__)


class MeasurementStorageError(Exception):
    """Raised when a measurement could not be written to the database."""


def _describe(exc: Exception) -> str:
    if isinstance(exc, SQLAlchemyError) and getattr(exc, "orig", None) is not None:
        return str(exc.orig)
    return str(exc) or type(exc).__name__


def build_measurement_table(name: str, metadata: sqlalchemy.MetaData) -> sqlalchemy.Table:
    return sqlalchemy.Table(
        name,
        metadata,
        sqlalchemy.Column("id", sqlalchemy.Integer, primary_key=True, autoincrement=True),
        sqlalchemy.Column("zeitpunkt", sqlalchemy.DateTime, nullable=True),
        sqlalchemy.Column("comessung", sqlalchemy.BigInteger, nullable=False),
        sqlalchemy.Column("temperature", sqlalchemy.Float, nullable=False),
        sqlalchemy.Column("raum_id", sqlalchemy.Integer, nullable=False),
    )


class MeasurementSink:
    """Appends measurements to a relational table through a pooled engine."""

    def __init__(self, engine: Engine, table_name: str = "temperaturmessung") -> None:
        self.engine = engine
        self._metadata = sqlalchemy.MetaData()
        self.table = build_measurement_table(table_name, self._metadata)

    @classmethod
    def from_url(cls, url: str, table_name: str = "temperaturmessung") -> "MeasurementSink":
        engine = sqlalchemy.create_engine(url, pool_pre_ping=True)
        return cls(engine=engine, table_name=table_name)

    def ensure_schema(self) -> None:
        self._metadata.create_all(self.engine, checkfirst=True)

    def insert(self, measurement: Measurement) -> None:
        context = {
            "temperature": measurement.temperature,
            "carbon": measurement.carbon,
            "room_id": measurement.room_id,
        }
        statement = self.table.insert().values(
            zeitpunkt=sqlalchemy.func.now(),
            comessung=measurement.carbon,
            temperature=measurement.temperature,
            raum_id=measurement.room_id,
        )
        try:
            with self.engine.begin() as connection:
                connection.execute(statement)
        except Exception as exc:  # noqa: BLE001 - drivers also raise outside the DBAPI hierarchy
            message = _describe(exc)
            logger.error(
                "Could not insert measurement",
                extra={**context, "error": message},
            )
            raise MeasurementStorageError(message) from exc

        logger.info("Stored measurement", extra=context)

    def close(self) -> None:
        self.engine.dispose()
