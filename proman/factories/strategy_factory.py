"""
Factory para crear estrategias de backup
"""
from typing import Optional
from ..process import ProcessService
from ..strategies.base_strategy import BackupStrategy
from ..strategies.postgresql_strategy import PostgreSQLBackupStrategy
from ..strategies.supabase_strategy import SupabaseBackupStrategy


class BackupStrategyFactory:
    """Factory para crear estrategias de backup (Factory Pattern)"""

    # Mapeo de modos a estrategias
    _strategies = {
        'pg_dump': PostgreSQLBackupStrategy,
        'official': SupabaseBackupStrategy,
    }

    @classmethod
    def create(cls, mode: str, process_service: Optional[ProcessService] = None) -> Optional[BackupStrategy]:
        """
        Crea una estrategia de backup según el modo

        Args:
            mode: 'pg_dump' (herramientas de PostgreSQL) u 'official' (CLI de la plataforma)
            process_service: Servicio de procesos a inyectar

        Returns:
            Instancia de BackupStrategy o None si el modo no es soportado
        """
        strategy_class = cls._strategies.get(mode.lower())
        if strategy_class:
            return strategy_class(process_service)
        return None
