"""
🔌 Database Connection Setup - MongoDB

Conexión a MongoDB y transacciones multi-documento.
La instancia se crea explícitamente (en el lifespan de la app) y se inyecta,
no hay estado global.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)
from pymongo.errors import (
    ConnectionFailure,
    OperationFailure,
    PyMongoError,
    ServerSelectionTimeoutError,
)

from zentype.core.exceptions import (
    StorageError,
    StorageUnavailableError,
    TransactionConflictError,
    TransactionOrderError,
)

logger = logging.getLogger(__name__)

# Código de MongoDB para WriteConflict
WRITE_CONFLICT_CODE = 112
RETRYABLE_LABELS = ("TransientTransactionError", "UnknownTransactionCommitResult")


class Transaction:
    """
    Handle de una transacción en curso.

    Primero se hacen TODAS las lecturas y después las escrituras.
    Leer después de escribir falla enseguida con TransactionOrderError.
    """

    def __init__(self, session: Any):
        self.session = session
        self.writes_started = False

    async def find_one(self, collection: AsyncIOMotorCollection, query: dict) -> Optional[dict]:
        if self.writes_started:
            raise TransactionOrderError(
                f"Read on '{collection.name}' issued after a write in the same transaction"
            )
        return await collection.find_one(query, session=self.session)

    async def insert_one(self, collection: AsyncIOMotorCollection, document: dict) -> Any:
        self.writes_started = True
        result = await collection.insert_one(document, session=self.session)
        return result.inserted_id

    async def update_one(
        self,
        collection: AsyncIOMotorCollection,
        query: dict,
        update: dict,
        upsert: bool = False
    ) -> int:
        """Retorna cuántos documentos matchearon (0 si fue un upsert nuevo)"""
        self.writes_started = True
        result = await collection.update_one(query, update, upsert=upsert, session=self.session)
        return result.matched_count


def _is_conflict(error: PyMongoError) -> bool:
    if any(error.has_error_label(label) for label in RETRYABLE_LABELS):
        return True
    if isinstance(error, ServerSelectionTimeoutError):
        # Sin servidores disponibles: la base está caída, no hay contención
        return False
    # ExecutionTimeout, NetworkTimeout (timeoutMS vencido), WTimeoutError
    if getattr(error, "timeout", False):
        return True
    return isinstance(error, OperationFailure) and error.code == WRITE_CONFLICT_CODE


def classify_error(error: PyMongoError) -> StorageError:
    """
    Traduce un error de pymongo a la taxonomía de StorageError.

    Las etiquetas de reintento se miran antes que el tipo: pymongo marca los
    errores de red dentro de una transacción como TransientTransactionError.
    """
    if _is_conflict(error):
        return TransactionConflictError(f"Transaction aborted: {error}")
    if isinstance(error, ConnectionFailure):
        return StorageUnavailableError(f"Document store unavailable: {error}")
    return StorageError(f"Database operation failed: {error}")


class MongoDatabase:
    """Conexión a MongoDB"""

    def __init__(
        self,
        uri: str,
        db_name: str = "zentype",
        timeout_ms: int = 10_000,
        max_commit_time_ms: int = 5_000,
    ):
        self.uri = uri
        self.db_name = db_name
        self.timeout_ms = timeout_ms
        self.max_commit_time_ms = max_commit_time_ms

        self.client: Optional[AsyncIOMotorClient] = None
        self.db: Optional[AsyncIOMotorDatabase] = None

    async def connect(self):
        """Conecta a MongoDB"""
        if self.client is None:
            self.client = AsyncIOMotorClient(
                self.uri,
                maxPoolSize=10,
                minPoolSize=2,
                tz_aware=True,
                timeoutMS=self.timeout_ms,
            )
            self.db = self.client[self.db_name]

            # Test de conexión
            await self.client.admin.command("ping")
            logger.info(f"✅ Connected to MongoDB: {self.db_name}")

    async def disconnect(self):
        """Cierra la conexión"""
        if self.client is not None:
            self.client.close()
            self.client = None
            self.db = None
            logger.info("❌ Disconnected from MongoDB")

    async def ping(self) -> bool:
        """True si el servidor responde"""
        if self.client is None:
            return False
        try:
            await self.client.admin.command("ping")
        except PyMongoError as e:
            logger.warning(f"MongoDB ping failed: {e}")
            return False
        return True

    def get_db(self) -> AsyncIOMotorDatabase:
        """Retorna la instancia de la base de datos"""
        if self.db is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self.db

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[Transaction]:
        """
        Abre una sesión y una transacción multi-documento.

        Si el bloque termina bien se hace commit; cualquier excepción aborta
        y nada de lo escrito queda visible. Los errores de pymongo se
        traducen a la taxonomía de StorageError.
        """
        if self.client is None:
            raise RuntimeError("Database not connected. Call connect() first.")

        try:
            async with await self.client.start_session() as session:
                async with session.start_transaction(max_commit_time_ms=self.max_commit_time_ms):
                    yield Transaction(session)
        except PyMongoError as e:
            raise classify_error(e) from e


# ============================================
# 🏗️ CREAR ÍNDICES
# ============================================

async def create_indexes(db: AsyncIOMotorDatabase):
    """
    Crea los índices que usan las queries de la app

    También deja creadas las colecciones, que tienen que existir antes
    de escribir en ellas dentro de una transacción
    """
    # Perfiles
    await db.profiles.create_index("email")
    await db.profiles.create_index("username")

    # Resultados
    await db.test_results.create_index([("user_id", 1), ("created_at", -1)])

    # Leaderboards
    for name in ("leaderboard", "leaderboard_weekly", "leaderboard_monthly"):
        await db[name].create_index([("avg_wpm", -1), ("best_wpm", -1), ("tests_completed", -1)])

    # Textos de práctica
    await db.test_contents.create_index("difficulty")
    await db.test_contents.create_index("category")

    logger.info("✅ Indexes created successfully")
