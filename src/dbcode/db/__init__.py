from dbcode.db.engine import get_engine
from dbcode.db.memory import InMemoryCodeDatabase, InMemorySchema
from dbcode.db.migrations import AlembicMigrationChecker, NoMigrationChecker
from dbcode.db.postgres import PostgresCodeDatabase

__all__ = [
    "AlembicMigrationChecker",
    "InMemoryCodeDatabase",
    "InMemorySchema",
    "NoMigrationChecker",
    "PostgresCodeDatabase",
    "get_engine",
]
