"""
Models package. Exposes the process-wide DBStorage instance as `storage`;
the application factory configures it from DATABASE_URL.
"""
from models.db_storage import DBStorage

storage = DBStorage()
