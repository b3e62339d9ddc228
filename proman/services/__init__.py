"""
Servicios de la aplicación
"""
from .backup_service import BackupService
from .clone_service import CloneService
from .database_service import DatabaseService
from .diff_service import DiffService
from .project_service import ProjectService
from .supabase_service import SupabaseService

__all__ = [
    'BackupService',
    'CloneService',
    'DatabaseService',
    'DiffService',
    'ProjectService',
    'SupabaseService'
]
