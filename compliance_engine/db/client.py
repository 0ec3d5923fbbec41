"""pymysql access for scoring lookups and score write-back.

One connection per thread. Sections scored on a WorkerPool each run on
their own thread, so they never share a connection; a connection that
dropped since its last use is revived in place by ping(reconnect=True).
"""

import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Literal, Optional

import pymysql
from pymysql.cursors import DictCursor

from compliance_engine.config import get_database_config

logger = logging.getLogger(__name__)

FetchMode = Literal["all", "one", "none"]

_local = threading.local()


def _connect() -> pymysql.Connection:
    params = get_database_config()
    logger.debug(f"Opening database connection to {params['host']}:{params['port']}/{params['database']}")
    return pymysql.connect(**params, autocommit=True, charset="utf8mb4", cursorclass=DictCursor)


def get_connection() -> pymysql.Connection:
    """This thread's connection, opened on first use."""
    conn: Optional[pymysql.Connection] = getattr(_local, "conn", None)
    if conn is None:
        conn = _connect()
        _local.conn = conn
    else:
        conn.ping(reconnect=True)
    return conn


def close_connection() -> None:
    """Close this thread's connection, if any."""
    conn = getattr(_local, "conn", None)
    _local.conn = None
    if conn is not None and conn.open:
        conn.close()


@contextmanager
def get_cursor() -> Iterator[DictCursor]:
    """Dict cursor on this thread's connection.

    Example:
        with get_cursor() as cur:
            cur.execute("SELECT weight FROM sections WHERE id = %s", (section_id,))
    """
    with get_connection().cursor() as cur:
        yield cur


def execute_query(sql: str, params: tuple | None = None, fetch: FetchMode = "all") -> list[dict] | dict | None:
    """Run one statement.

    Args:
        sql: Statement with %s placeholders
        params: Values bound to the placeholders
        fetch: "all" returns every row, "one" the first row or None,
            "none" nothing (UPDATE/INSERT)
    """
    with get_cursor() as cur:
        cur.execute(sql, params or ())
        if fetch == "none":
            return None
        if fetch == "one":
            return cur.fetchone()
        return list(cur.fetchall())


def check_connection() -> bool:
    """True if the database answers a trivial query."""
    try:
        return execute_query("SELECT 1 AS ok", fetch="one") is not None
    except pymysql.Error as e:
        logger.warning(f"Database unavailable: {e}")
        return False
