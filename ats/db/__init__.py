"""
Database module - SQL (users) and MongoDB (applicants) connections.
"""
from ats.db.sql import get_db_session, check_sql_connection
from ats.db.mongodb import get_mongo_db, check_mongo_connection

__all__ = [
    "get_db_session",
    "check_sql_connection",
    "get_mongo_db",
    "check_mongo_connection"
]
