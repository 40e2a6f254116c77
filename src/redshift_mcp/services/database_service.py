"""Database service for warehouse connections."""

import threading
import psycopg2
import psycopg2.errors
from psycopg2 import pool
from psycopg2.extras import RealDictCursor
from typing import List, Dict, Any, Optional
from contextlib import contextmanager

from redshift_mcp.models.error_types import ConnectionError, EngineError, RollbackWarning
from redshift_mcp.lib.logging_config import get_logger, log_database_query, log_error_with_context

# Module logger
logger = get_logger(__name__)


class DatabaseService:
    """Process-wide connection pool shared by every request.

    The pool is created once by ``connect`` and closed once by ``close``;
    it is never recreated. Each logical request borrows one connection via
    ``get_connection`` and hands it back on every exit path. When all
    connections are borrowed, borrowers block until one is returned.
    """

    def __init__(self, config: Dict[str, Any], pool_size: int = 5):
        """Initialize database service.

        Args:
            config: Connection settings (see ``DatabaseConfig.to_dict``)
            pool_size: Maximum number of connections in pool
        """
        self.config = config
        self.pool_size = pool_size
        self.pool = None
        self.query_timeout = int(config.get('query_timeout') or 0) * 1000  # Convert to ms
        self._closed = False
        self._slots = threading.BoundedSemaphore(pool_size)
        self._lock = threading.Lock()
        self._in_use = 0

    def connect(self) -> bool:
        """Establish the database connection pool.

        Returns:
            True if connection successful

        Raises:
            ConnectionError: If the pool cannot be created, or was created before
        """
        if self.pool is not None or self._closed:
            raise ConnectionError("Database connection pool can only be initialized once")

        logger.info(f"Connecting to database: {self.config['host']}:{self.config['port']}/{self.config['database']}")
        try:
            self.pool = psycopg2.pool.ThreadedConnectionPool(
                minconn=min(2, self.pool_size),
                maxconn=self.pool_size,
                host=self.config['host'],
                port=self.config['port'],
                database=self.config['database'],
                user=self.config.get('user'),
                password=self.config.get('password'),
                sslmode=self.config.get('sslmode', 'prefer'),
                connect_timeout=self.config.get('connect_timeout', 10)
            )
            logger.info(f"Database connection pool established (size: {self.pool_size})")
            return True
        except psycopg2.Error as e:
            log_error_with_context(e, {'host': self.config['host'], 'database': self.config['database']}, logger)
            raise ConnectionError(f"Failed to connect to database: {str(e).strip()}")

    @contextmanager
    def get_connection(self):
        """Borrow a connection from the pool for one logical request.

        Blocks while the pool is exhausted. The connection is returned
        whether the body succeeds, fails or is interrupted; a connection
        that was closed or broken along the way is discarded instead.

        Yields:
            psycopg2 connection object

        Raises:
            ConnectionError: If the pool is not initialized or cannot hand out a connection
        """
        if not self.pool:
            logger.error("Attempted to get connection but pool not initialized")
            raise ConnectionError("Database connection pool not initialized")

        self._slots.acquire()
        conn = None
        try:
            try:
                conn = self.pool.getconn()
            except psycopg2.pool.PoolError as e:
                raise ConnectionError(f"Connection pool exhausted: {str(e)}")
            except psycopg2.Error as e:
                raise ConnectionError(f"Failed to get connection from pool: {str(e).strip()}")
            self._track(1)
            logger.debug("Connection acquired from pool")
            yield conn
        finally:
            if conn is not None:
                self._release(conn)
            self._slots.release()

    def _track(self, delta: int):
        with self._lock:
            self._in_use += delta

    def _release(self, conn):
        """Return a borrowed connection to the pool."""
        self._track(-1)
        pool_ref = self.pool
        if pool_ref is None:
            if not conn.closed:
                conn.close()
            return
        try:
            pool_ref.putconn(conn, close=bool(conn.closed))
            logger.debug("Connection returned to pool")
        except psycopg2.pool.PoolError as e:
            logger.warning(f"Could not return connection to pool: {e}")

    @contextmanager
    def cursor(self):
        """Borrow a connection and yield a dict cursor on it.

        Used for catalog queries that need several statements on one
        connection. The implicit transaction is rolled back by the pool
        when the connection is returned.
        """
        with self.get_connection() as conn:
            with conn.cursor(cursor_factory=RealDictCursor) as cursor:
                if self.query_timeout:
                    self.run_query(cursor, f"SET statement_timeout = {self.query_timeout}", fetch=False)
                yield cursor

    def run_query(self, cursor, query: str, params: Optional[tuple] = None,
                  fetch: bool = True) -> List[Dict[str, Any]]:
        """Execute one statement on an open cursor.

        Args:
            cursor: Cursor from ``cursor()``
            query: SQL statement
            params: Bound parameters
            fetch: Whether to fetch the result rows

        Returns:
            List of row dictionaries with field names as the engine returned them

        Raises:
            EngineError: If the statement fails
        """
        log_database_query(query, params, logger)
        try:
            cursor.execute(query, params)
            if not fetch or cursor.description is None:
                return []
            results = cursor.fetchall()
        except psycopg2.Error as e:
            raise self._engine_error(e)
        logger.debug(f"Query returned {len(results)} rows")
        return [dict(row) for row in results]

    def execute_query(self, query: str, params: Optional[tuple] = None) -> List[Dict[str, Any]]:
        """Execute a single catalog query on a freshly borrowed connection.

        Args:
            query: SQL query to execute
            params: Query parameters for parameterized queries

        Returns:
            List of dictionaries containing query results

        Raises:
            EngineError: If query execution fails
        """
        with self.cursor() as cursor:
            return self.run_query(cursor, query, params)

    def execute_readonly_query(self, query: str, params: Optional[tuple] = None) -> List[Dict[str, Any]]:
        """Execute client SQL inside a read-only transaction that is always rolled back.

        The transaction is opened explicitly with ``BEGIN TRANSACTION READ
        ONLY`` on an autocommit connection, so the driver cannot have
        started a read-write transaction first. The engine rejects writes
        inside it; the SQL text itself is not inspected.

        Whether the statement succeeds or fails, ``ROLLBACK`` is issued
        and nothing is ever committed. A failed rollback is logged and the
        connection discarded; it never replaces the query's own result or
        error.

        Args:
            query: SQL text, executed verbatim
            params: Optional bound parameters

        Returns:
            List of dictionaries containing query results

        Raises:
            EngineError: If the statement fails
        """
        log_database_query(query, params, logger)
        logger.debug("Executing read-only query")
        with self.get_connection() as conn:
            previous_autocommit = conn.autocommit
            discard = False
            try:
                conn.autocommit = True
            except psycopg2.Error as e:
                raise self._engine_error(e)
            try:
                with conn.cursor(cursor_factory=RealDictCursor) as cursor:
                    try:
                        cursor.execute("BEGIN TRANSACTION READ ONLY")
                        if self.query_timeout:
                            cursor.execute(f"SET LOCAL statement_timeout = {self.query_timeout}")
                        cursor.execute(query, params)
                        results = cursor.fetchall() if cursor.description is not None else []
                        logger.debug(f"Read-only query returned {len(results)} rows")
                        return [dict(row) for row in results]
                    except psycopg2.Error as e:
                        raise self._engine_error(e)
                    finally:
                        try:
                            self._rollback(cursor)
                        except RollbackWarning as warning:
                            logger.warning(f"Could not roll back transaction: {warning.message}")
                            discard = True
            finally:
                if not discard and not conn.closed:
                    try:
                        conn.autocommit = previous_autocommit
                    except psycopg2.Error as e:
                        logger.warning(f"Could not reset connection mode: {str(e).strip()}")
                        discard = True
                if discard:
                    conn.close()

    def _rollback(self, cursor):
        """End the read-only transaction.

        Raises:
            RollbackWarning: If the engine refuses or the connection is gone
        """
        try:
            cursor.execute("ROLLBACK")
        except psycopg2.Error as e:
            raise RollbackWarning(str(e).strip())

    def _engine_error(self, e: psycopg2.Error) -> EngineError:
        """Map a driver error to an EngineError with a readable message."""
        detail = str(e).strip()
        if isinstance(e, psycopg2.errors.UndefinedTable):
            logger.error(f"Table does not exist: {detail}")
            return EngineError(f"Table does not exist: {detail}", recoverable=False)
        if isinstance(e, psycopg2.errors.SyntaxError):
            logger.error(f"SQL syntax error: {detail}")
            return EngineError(f"SQL syntax error: {detail}", recoverable=False)
        if isinstance(e, psycopg2.errors.InsufficientPrivilege):
            logger.error(f"Permission denied: {detail}")
            return EngineError(f"Permission denied: {detail}", recoverable=False)
        if isinstance(e, psycopg2.errors.ReadOnlySqlTransaction):
            logger.warning(f"Write attempted in read-only transaction: {detail}")
            return EngineError(f"Write operation attempted in read-only mode: {detail}", recoverable=False)
        if isinstance(e, psycopg2.errors.QueryCanceled):
            logger.warning(f"Query timeout exceeded: {detail}")
            return EngineError(f"Query timeout exceeded: {detail}", recoverable=True)
        logger.error(f"Database error: {detail}")
        return EngineError(f"Database error: {detail}", recoverable=True)

    def pool_status(self) -> Dict[str, Any]:
        """Report how many pooled connections are borrowed and free."""
        with self._lock:
            in_use = self._in_use
        return {
            'initialized': self.pool is not None,
            'size': self.pool_size,
            'in_use': in_use,
            'available': self.pool_size - in_use
        }

    def ping(self) -> bool:
        """Run a trivial query to confirm the warehouse answers."""
        rows = self.execute_query("SELECT 1 AS ok")
        return bool(rows) and rows[0].get('ok') == 1

    def close(self):
        """Close all database connections."""
        self._closed = True
        if self.pool:
            self.pool.closeall()
            self.pool = None
