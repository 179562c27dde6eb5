"""MongoDB adapter: the store handle shared by repositories.

One MongoStore is created on application startup, kept on ``app.state`` and
handed to services through a FastAPI dependency; nothing here is module-global.
"""

from typing import Optional
import logging
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

logger = logging.getLogger("hostelmeals.mongo")

USERS = "users"
MEALS = "meals"
UPCOMING_MEALS = "upcomingMeals"
MEAL_REQUESTS = "mealRequests"
REVIEWS = "reviews"
PAYMENTS = "payments"


class MongoStore:
    """Lifecycle-scoped handle over the hostel database."""

    def __init__(
        self,
        uri: str,
        db_name: str = "hostelDB",
        server_selection_timeout_ms: int = 5000,
    ):
        self.uri = uri
        self.db_name = db_name
        self.server_selection_timeout_ms = server_selection_timeout_ms
        self._client: Optional[MongoClient] = None
        self._db: Optional[Database] = None

    @classmethod
    def from_database(cls, db: Database) -> "MongoStore":
        """Wrap an already-open database (scripts, tests)."""
        store = cls(uri="", db_name=db.name)
        store._db = db
        return store

    # ------------------ Connection ------------------
    def connect(self) -> None:
        """Open the client, verify the server answers and create indexes.

        Raises pymongo errors unchanged so the caller can retry.
        """
        client = MongoClient(
            self.uri, serverSelectionTimeoutMS=self.server_selection_timeout_ms
        )
        try:
            client.admin.command("ping")
        except Exception:
            client.close()
            raise
        self._client = client
        self._db = client[self.db_name]
        logger.info("Connected to MongoDB (database: %s)", self.db_name)
        self.ensure_indexes()

    def close(self) -> None:
        """Close MongoDB connection."""
        try:
            if self._client is not None:
                self._client.close()
                logger.info("MongoDB client closed")
        finally:
            self._client = None
            self._db = None

    def ping(self) -> bool:
        if self._db is None:
            return False
        try:
            self._db.command("ping")
            return True
        except Exception:
            logger.exception("MongoDB ping failed")
            return False

    @property
    def db(self) -> Database:
        if self._db is None:
            raise RuntimeError("MongoStore is not connected")
        return self._db

    @property
    def is_connected(self) -> bool:
        return self._db is not None

    def ensure_indexes(self) -> None:
        """Indexes backing the uniqueness invariants and the common lookups."""
        self.users.create_index([("email", ASCENDING)], unique=True)
        self.meal_requests.create_index(
            [("userEmail", ASCENDING), ("mealId", ASCENDING)], unique=True
        )
        self.meal_requests.create_index([("requestedAt", DESCENDING)])
        self.reviews.create_index([("mealId", ASCENDING), ("createdAt", DESCENDING)])
        self.reviews.create_index([("userEmail", ASCENDING)])
        self.payments.create_index([("paymentIntentId", ASCENDING)], unique=True)
        self.payments.create_index([("userEmail", ASCENDING), ("purchasedAt", DESCENDING)])
        self.payments.create_index([("tierApplied", ASCENDING)])
        self.upcoming_meals.create_index([("publishDate", ASCENDING)])
        logger.info("MongoDB indexes ensured")

    # ------------------ Collections ------------------
    @property
    def users(self) -> Collection:
        return self.db[USERS]

    @property
    def meals(self) -> Collection:
        return self.db[MEALS]

    @property
    def upcoming_meals(self) -> Collection:
        return self.db[UPCOMING_MEALS]

    @property
    def meal_requests(self) -> Collection:
        return self.db[MEAL_REQUESTS]

    @property
    def reviews(self) -> Collection:
        return self.db[REVIEWS]

    @property
    def payments(self) -> Collection:
        return self.db[PAYMENTS]
