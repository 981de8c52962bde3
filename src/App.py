"""
Application singleton class for the portfolio analytics service.

This module contains the main App class that manages the database
connection, the Redis token store and the analytics aggregator using the
singleton pattern.
"""

import logging
from contextlib import contextmanager

from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, scoped_session, sessionmaker

from backend.analytics import AnalyticsAggregator
from backend.redis_manager import RedisManager
from database.db import Base
from PortfolioConfig import PortfolioConfig


class App:
    """
    Singleton application class to manage database connections and application services.

    This class serves as the main application container that manages:
    - Database connection and session factory
    - Redis manager for bearer token lookups
    - Analytics aggregator for the dashboard

    The class implements the singleton pattern to ensure only one instance exists
    throughout the application lifecycle.
    """

    __instance = None  # Class-level attribute to store the singleton instance

    def __new__(cls, *args, **kwargs):
        """
        Create or return the singleton instance.

        Returns:
            App: The singleton instance of the App class
        """
        if cls.__instance is None:
            cls.__instance = super(App, cls).__new__(cls)
        return cls.__instance

    def __init__(self):
        """
        Initialize the App instance.

        Uses a flag to ensure initialization only happens once for the singleton instance.
        """
        if not hasattr(self, "_initialized"):
            self.__db_session_factory: scoped_session = None  # type: ignore
            self.__redis_manager: RedisManager = None  # type: ignore
            self.__analytics_aggregator: AnalyticsAggregator = None  # type: ignore

            # Flag to ensure __init__ is only called once for singleton
            self._initialized: bool = True

            self.__setup(PortfolioConfig())  # type: ignore

    def __setup(self, config: PortfolioConfig) -> None:
        """
        Sets up all application services and connections.

        This method initializes:
        1. Database engine, schema and session factory
        2. Redis manager for bearer tokens
        3. Analytics aggregator bound to the session factory

        Args:
            config (PortfolioConfig): Configuration object containing all settings

        Raises:
            RuntimeError: If database connection fails
        """
        database_url = config.database_url

        engine = create_engine(
            database_url,
            pool_size=config.db_pool_size,
            max_overflow=config.db_max_overflow,
            pool_timeout=config.db_pool_timeout,
            pool_recycle=config.db_pool_recycle,
        )

        # Scoped session factory gives every worker thread its own session
        self.__db_session_factory = scoped_session(
            sessionmaker(autocommit=False, autoflush=False, bind=engine)
        )

        # Test database connectivity by executing a simple query
        try:
            with engine.connect() as connection:
                connection.execute(text("SELECT 1"))
                logging.log(
                    logging.INFO,
                    f"Connected to database {config.db_host}:{config.db_port}/{config.db_name} successfully.",
                )
        except Exception as e:
            logging.log(logging.ERROR, f"Failed to connect to the database: {e}")
            raise RuntimeError(
                f"Database {config.db_host}:{config.db_port}/{config.db_name} is not accessible. "
                "Please check the configuration."
            )

        Base.metadata.create_all(engine)

        self.__redis_manager = RedisManager(
            host=config.redis_host,
            port=config.redis_port,
            auth_token_expires_in_seconds=config.auth_token_expires_in_seconds,
        )

        self.__analytics_aggregator = AnalyticsAggregator(
            session_factory=self.get_db_session_fresh,
            top_n=config.analytics_top_n,
            admin_path_prefix=config.analytics_admin_path_prefix,
            max_workers=config.analytics_max_workers,
        )

    def get_db_session(self) -> Session:
        """
        Provides a managed database session with automatic transaction handling.

        Returns:
            Session: SQLAlchemy database session with transaction management

        Raises:
            RuntimeError: If database is not initialized
        """

        @contextmanager
        def __get_db_session_unmanaged():
            session = self.__db_session_factory()
            try:
                yield session
                session.commit()  # Commit transaction on success
            except Exception:
                session.rollback()  # Rollback on any exception
                raise  # Re-raise the exception
            finally:
                session.close()  # Always close the session

        if self.__db_session_factory is None:
            raise RuntimeError("Database is not initialized. Call `App.setup` first.")

        with __get_db_session_unmanaged() as db_session:
            return db_session

    def get_db_session_fresh(self) -> Session:
        """
        Returns a new unmanaged database session.

        The caller is responsible for committing, rolling back, and closing the
        session. Sessions are scoped per thread, so facet workers never share one.

        Raises:
            RuntimeError: If database is not initialized
        """
        if self.__db_session_factory is None:
            raise RuntimeError("Database is not initialized. Call `App.setup` first.")
        return self.__db_session_factory()

    def get_redis_manager(self) -> RedisManager:
        return self.__redis_manager

    def get_analytics_aggregator(self) -> AnalyticsAggregator:
        """
        Get the analytics aggregator.

        Returns:
            AnalyticsAggregator: Engine computing the dashboard summary
        """
        return self.__analytics_aggregator

    @classmethod
    def get_instance(cls) -> "App":
        """
        Get the singleton instance of the App class, creating it if needed.
        """
        if cls.__instance is None:
            cls.__instance = cls()
        return cls.__instance

    def cleanup(self):
        """
        Clean up all application resources and connections, in reverse order
        of initialization.
        """
        self.__redis_manager.close()
        self.__db_session_factory.remove()
