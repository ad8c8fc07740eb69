from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from datetime import datetime, tzinfo
from typing import Any, Dict, Iterator, List, Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import StorageError, UniqueViolation
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

# Connection shared by every repository call inside one transaction() block.
_active = threading.local()


def _translate(err: mysql.connector.Error) -> StorageError:
    if getattr(err, "errno", None) == errorcode.ER_DUP_ENTRY:
        return UniqueViolation(str(err))
    return StorageError(str(err))


@contextmanager
def transaction(conn_factory: DatabaseConnection) -> Iterator[None]:
    """Unit of work: all db_cursor() calls inside share one connection.

    Commits on success, rolls back on any exception. Nested blocks join the
    outer transaction.
    """

    if getattr(_active, "conn", None) is not None:
        yield
        return

    conn = conn_factory.connect()
    _active.conn = conn
    try:
        yield
        conn.commit()
    except mysql.connector.Error as e:
        conn.rollback()
        raise _translate(e) from e
    except Exception:
        conn.rollback()
        raise
    finally:
        _active.conn = None
        conn.close()


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    shared = getattr(_active, "conn", None)
    if shared is not None:
        cur = shared.cursor(dictionary=dictionary)
        try:
            yield shared, cur
        except mysql.connector.Error as e:
            raise _translate(e) from e
        finally:
            cur.close()
        return

    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as e:
        conn.rollback()
        logger.error("Database error: %s", e)
        raise _translate(e) from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def as_aware(value: Optional[datetime], tz: tzinfo) -> Optional[datetime]:
    """MySQL DATETIME columns come back naive; they are stored in business local time."""

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def as_naive(value: Optional[datetime], tz: tzinfo) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value
    return value.astimezone(tz).replace(tzinfo=None)
