"""Database configuration and point storage utilities."""

import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple

import pymysql
from pymysql.cursors import DictCursor

from .errors import StorageError
from .models import MEASUREMENT, TAG_KEYS, FieldValue, Point, StoreRow, value_type_of

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 500

SCHEMA_SQL = f"""
    CREATE TABLE IF NOT EXISTS {MEASUREMENT} (
        id BIGINT AUTO_INCREMENT PRIMARY KEY,
        timestamp DATETIME(3) NOT NULL,
        device_mac VARCHAR(64) COLLATE utf8mb4_bin NOT NULL,
        device_type VARCHAR(64) COLLATE utf8mb4_bin NOT NULL,
        device_category VARCHAR(16) COLLATE utf8mb4_bin NOT NULL,
        gateway_id VARCHAR(64) COLLATE utf8mb4_bin NOT NULL,
        group_id VARCHAR(64) COLLATE utf8mb4_bin NOT NULL,
        field VARCHAR(128) COLLATE utf8mb4_bin NOT NULL,
        value_type VARCHAR(8) NOT NULL,
        value TEXT NOT NULL,
        INDEX idx_device_field_time (device_mac, field, timestamp)
    ) DEFAULT CHARSET=utf8mb4
"""

ROW_COLUMNS = ", ".join(TAG_KEYS + ("field", "value_type", "value", "timestamp"))


@dataclass
class DBConfig:
    """Database connection configuration."""
    host: str
    user: str
    password: str
    database: str
    port: int = 3306

    @classmethod
    def from_env(cls) -> "DBConfig":
        """Create config from environment variables."""
        return cls(
            host=os.getenv("DB_HOST", "localhost"),
            user=os.getenv("DB_USER", ""),
            password=os.getenv("DB_PASSWORD", ""),
            database=os.getenv("DB_DATABASE", "sensorhub"),
            port=int(os.getenv("DB_PORT", "3306")),
        )


def encode_value(value: FieldValue) -> Tuple[str, str]:
    """Return the (value_type, text) pair stored for a field value."""
    value_type = value_type_of(value)
    if value_type == "float":
        return value_type, repr(value)
    return value_type, str(value)


def decode_value(value_type: str, text: str) -> FieldValue:
    """Turn a stored (value_type, text) pair back into a Python value."""
    if value_type == "integer":
        return int(text)
    if value_type == "float":
        return float(text)
    return text


def to_db_time(timestamp: datetime) -> datetime:
    """Convert an aware datetime to the naive UTC form MySQL stores."""
    if timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone(timezone.utc).replace(tzinfo=None)
    return timestamp


def from_db_time(timestamp: datetime) -> datetime:
    return timestamp.replace(tzinfo=timezone.utc)


def row_from_record(record: Dict[str, Any]) -> StoreRow:
    """Build a StoreRow from a DictCursor result."""
    return StoreRow(
        device_mac=record["device_mac"],
        device_type=record["device_type"],
        device_category=record["device_category"],
        gateway_id=record["gateway_id"],
        group_id=record["group_id"],
        field=record["field"],
        value=decode_value(record["value_type"], record["value"]),
        timestamp=from_db_time(record["timestamp"]),
    )


def get_latest_query(mac: Optional[str] = None, exclude_fields: Iterable[str] = ()) -> Tuple[str, List[Any]]:
    """Get the SQL selecting the most recent row per device and field.

    Without a MAC the partition covers the full tag set plus the field name.
    With a MAC the tags are uniform, so rows are partitioned by field only.
    """
    conditions = []
    params: List[Any] = []

    if mac is not None:
        conditions.append("device_mac = %s")
        params.append(mac)
        partition = "field"
    else:
        partition = ", ".join(TAG_KEYS + ("field",))

    exclude_fields = list(exclude_fields)
    if exclude_fields:
        placeholders = ", ".join(["%s"] * len(exclude_fields))
        conditions.append(f"field NOT IN ({placeholders})")
        params.extend(exclude_fields)

    where_clause = " AND ".join(conditions) if conditions else "1=1"

    query = f"""
        WITH ranked AS (
            SELECT
                {ROW_COLUMNS},
                ROW_NUMBER() OVER (
                    PARTITION BY {partition}
                    ORDER BY timestamp DESC, id DESC
                ) AS rn
            FROM {MEASUREMENT}
            WHERE {where_clause}
        )
        SELECT {ROW_COLUMNS}
        FROM ranked
        WHERE rn = 1
    """
    return query, params


def get_series_query() -> str:
    """Get the SQL selecting one field's points for one device in a time range."""
    return f"""
        SELECT {ROW_COLUMNS}
        FROM {MEASUREMENT}
        WHERE device_mac = %s
          AND field = %s
          AND timestamp >= %s
          AND timestamp < %s
        ORDER BY timestamp ASC, id ASC
    """


class PointStorage:
    """Manages storage and retrieval of device points in MySQL.

    Writes are buffered and submitted in batches. Queries are stateless and
    use a fresh connection each, so one instance can be shared by every
    component in the process.
    """

    def __init__(self, db_config: DBConfig, batch_size: int = DEFAULT_BATCH_SIZE):
        """Initialize storage with database configuration.

        Args:
            db_config: Database connection configuration.
            batch_size: Number of buffered points that triggers a flush.
        """
        self.db_config = db_config
        self.batch_size = max(1, batch_size)
        self.points_written = 0
        self._buffer: List[Point] = []
        self._connection: Optional[pymysql.Connection] = None

    def __enter__(self) -> "PointStorage":
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is None:
            self.close()
            return
        # The run already failed; still try to submit what was built but
        # keep the original exception.
        try:
            self.close()
        except StorageError as e:
            logger.error(f"Flush during shutdown failed: {e}")

    def _connect(self) -> pymysql.Connection:
        try:
            return pymysql.connect(
                host=self.db_config.host,
                port=self.db_config.port,
                user=self.db_config.user,
                password=self.db_config.password,
                database=self.db_config.database,
                cursorclass=DictCursor,
            )
        except pymysql.MySQLError as e:
            raise StorageError(f"Cannot connect to {self.db_config.host}: {e}") from e

    def _get_connection(self) -> pymysql.Connection:
        """Get or create the write connection."""
        if self._connection is None or not self._connection.open:
            self._connection = self._connect()
        return self._connection

    def ensure_schema(self) -> None:
        """Create the readings table if it does not exist."""
        conn = self._get_connection()
        try:
            with conn.cursor() as cursor:
                cursor.execute(SCHEMA_SQL)
            conn.commit()
        except pymysql.MySQLError as e:
            raise StorageError(f"Error creating schema: {e}") from e

    def write_point(self, point: Point) -> None:
        """Buffer a point, flushing once the batch is full."""
        self._buffer.append(point)
        if len(self._buffer) >= self.batch_size:
            self.flush()

    @property
    def pending(self) -> int:
        """Number of buffered points not yet submitted."""
        return len(self._buffer)

    def flush(self) -> int:
        """Submit all buffered points in a single transaction.

        Returns:
            Number of points submitted.

        Raises:
            StorageError: If the insert fails. The buffer is kept so the
                caller can decide whether to retry.
        """
        if not self._buffer:
            return 0

        values = []
        for point in self._buffer:
            tags = tuple(point.tags[key] for key in TAG_KEYS)
            timestamp = to_db_time(point.timestamp)
            for name, value in point.fields.items():
                value_type, text = encode_value(value)
                values.append(tags + (name, value_type, text, timestamp))

        insert_sql = f"""
            INSERT INTO {MEASUREMENT}
            ({ROW_COLUMNS})
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
        """

        conn = self._get_connection()
        try:
            with conn.cursor() as cursor:
                if values:
                    cursor.executemany(insert_sql, values)
            conn.commit()
        except pymysql.MySQLError as e:
            logger.error(f"Error storing points: {e}")
            conn.rollback()
            raise StorageError(f"Error storing {len(self._buffer)} points: {e}") from e

        submitted = len(self._buffer)
        self.points_written += submitted
        self._buffer.clear()
        logger.debug(f"Flushed {submitted} points ({len(values)} rows)")
        return submitted

    def _fetch(self, query: str, params: List[Any]) -> List[StoreRow]:
        conn = self._connect()
        try:
            with conn.cursor() as cursor:
                cursor.execute(query, params)
                return [row_from_record(record) for record in cursor.fetchall()]
        except pymysql.MySQLError as e:
            logger.error(f"Error querying points: {e}")
            raise StorageError(f"Query failed: {e}") from e
        finally:
            conn.close()

    def query_latest(
        self,
        mac: Optional[str] = None,
        exclude_fields: Iterable[str] = (),
    ) -> List[StoreRow]:
        """Get the most recent value of every (device, field) pair.

        Args:
            mac: Restrict to one device.
            exclude_fields: Field names to leave out.

        Returns:
            One row per device and field, in no particular order.
        """
        query, params = get_latest_query(mac, exclude_fields)
        return self._fetch(query, params)

    def query_series(
        self,
        mac: str,
        field: str,
        start: datetime,
        stop: datetime,
    ) -> List[StoreRow]:
        """Get all values of one field for one device in [start, stop).

        Returns:
            Rows ordered by ascending timestamp.
        """
        params = [mac, field, to_db_time(start), to_db_time(stop)]
        return self._fetch(get_series_query(), params)

    def close(self):
        """Flush pending points and close the write connection."""
        try:
            self.flush()
        finally:
            if self._connection:
                self._connection.close()
                self._connection = None
