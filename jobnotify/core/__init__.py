"""
JobNotify Core
==============

Core utilities and shared functionality for JobNotify modules.
"""

from .config import Config, as_bool
from .logging_service import LoggingService, db_log
from .storage import Storage, MemStorage, StorageError, EntityNotFound, DuplicateEntity, get_storage

__all__ = [
    'Config', 'as_bool', 'LoggingService', 'db_log',
    'Storage', 'MemStorage', 'StorageError', 'EntityNotFound', 'DuplicateEntity', 'get_storage',
]
