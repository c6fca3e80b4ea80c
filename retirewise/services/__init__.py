# retirewise/services/__init__.py

from .unified_db import UnifiedDB, start_of_local_day
from .migration import MigrationService
from .backup import BackupService

__all__ = ["UnifiedDB", "start_of_local_day", "MigrationService", "BackupService"]
