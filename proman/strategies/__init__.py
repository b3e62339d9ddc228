"""
Estrategias de backup
"""
from .base_strategy import BackupStrategy
from .postgresql_strategy import PostgreSQLBackupStrategy, filter_roles
from .supabase_strategy import SupabaseBackupStrategy

__all__ = [
    'BackupStrategy',
    'PostgreSQLBackupStrategy',
    'SupabaseBackupStrategy',
    'filter_roles'
]
