"""
Database configuration and connection management.
Handles MongoDB connection lifecycle and database operations.
"""
import logging
from typing import Optional

from fastapi import FastAPI, HTTPException
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from contextlib import asynccontextmanager

from .logging import setup_logging
from .settings import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


class DatabaseManager:
    """Manages MongoDB database connection and operations."""

    def __init__(self):
        self.client: Optional[AsyncIOMotorClient] = None
        self.database: Optional[AsyncIOMotorDatabase] = None

    async def connect(self) -> None:
        """Establish connection to MongoDB."""
        try:
            logger.info("🚀 Connecting to MongoDB...")

            self.client = AsyncIOMotorClient(
                settings.mongodb_url,
                serverSelectionTimeoutMS=settings.mongodb_server_selection_timeout_ms,
                connectTimeoutMS=settings.mongodb_connect_timeout_ms,
                socketTimeoutMS=settings.mongodb_socket_timeout_ms,
                maxPoolSize=settings.mongodb_max_pool_size,
                minPoolSize=settings.mongodb_min_pool_size,
                retryWrites=settings.mongodb_retry_writes,
                tz_aware=True,
            )
            self.database = self.client[settings.database_name]

            await self.client.admin.command("ping")
            logger.info("✅ Connected to MongoDB successfully")

        except Exception as db_error:
            # Keep serving /health and / without a database
            logger.warning(f"⚠️  MongoDB connection failed: {db_error}")
            self.database = None

    async def disconnect(self) -> None:
        """Close MongoDB connection."""
        try:
            if self.client is not None:
                self.client.close()
                logger.info("🔌 MongoDB connection closed")
        except Exception as e:
            logger.error(f"Error during database disconnect: {e}")
        finally:
            self.client = None
            self.database = None

    async def create_indexes(self) -> None:
        """Create the indexes the marketplace queries rely on."""
        if self.database is None:
            logger.warning("Database not connected, skipping index creation")
            return

        try:
            await self.database.users.create_index("email", unique=True)
            await self.database.users.create_index("phone", unique=True, sparse=True)
            await self.database.users.create_index("role")

            await self.database.products.create_index("name")
            await self.database.products.create_index("category")
            await self.database.products.create_index("seller")
            await self.database.products.create_index([("is_active", 1), ("created_at", -1)])

            await self.database.carts.create_index("user", unique=True)

            await self.database.orders.create_index("order_number", unique=True)
            await self.database.orders.create_index([("user", 1), ("created_at", -1)])
            await self.database.orders.create_index("items.seller")
            await self.database.orders.create_index("status")

            await self.database.reviews.create_index(
                [("product", 1), ("user", 1), ("order", 1)], unique=True
            )
            await self.database.coupons.create_index("code", unique=True)
            await self.database.chats.create_index("participants")
            await self.database.messages.create_index([("chat", 1), ("created_at", 1)])

            logger.info("✅ Database indexes created successfully")

        except Exception as index_error:
            logger.warning(f"⚠️  Failed to create indexes: {index_error}")

    def get_database(self) -> AsyncIOMotorDatabase:
        """Get database instance."""
        if self.database is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self.database

    def is_connected(self) -> bool:
        """Check if database is connected."""
        return self.database is not None


# Global database manager instance
db_manager = DatabaseManager()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """FastAPI lifespan context manager for database connection."""
    setup_logging()
    try:
        logger.info("🚀 Starting up application...")
        await db_manager.connect()
        await db_manager.create_indexes()
        app.state.db_manager = db_manager
    except Exception as e:
        logger.error(f"❌ Failed to initialize application: {e}")

    yield

    await db_manager.disconnect()


async def get_database() -> AsyncIOMotorDatabase:
    """FastAPI dependency to get database instance."""
    if not db_manager.is_connected():
        raise HTTPException(
            status_code=503,
            detail="Database connection not available. Please check your MongoDB connection."
        )
    return db_manager.get_database()


def get_database_manager() -> DatabaseManager:
    """Get database manager instance."""
    return db_manager
