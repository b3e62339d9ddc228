#!/usr/bin/env python3
"""
proman - Gestor de proyectos de bases de datos alojadas
Punto de entrada principal

Uso:
    python main.py connection register          # Registrar un proyecto
    python main.py db backup mi_proyecto        # Backup completo
    python main.py db clone --source a --target b
    python main.py help                         # Ayuda
"""
import argparse
import logging
import sys
from pathlib import Path

# Agregar directorio raíz al path
sys.path.insert(0, str(Path(__file__).parent))

from proman.config import Config
from proman.exceptions import InvalidArgumentError, ProManError, UserCancelledError
from proman.logger import LoggerService
from proman.models import BackupKind, BackupOptions
from proman.repositories.config_repository import ConfigRepository
from proman.services.backup_service import BackupService
from proman.services.clone_service import CloneService
from proman.services.database_service import DatabaseService
from proman.services.diff_service import DiffService
from proman.services.project_service import ProjectService
from proman.services.supabase_service import SupabaseService


def build_parser() -> argparse.ArgumentParser:
    """
    Construye el parser de línea de comandos

    Returns:
        ArgumentParser con todos los comandos y subcomandos
    """
    parser = argparse.ArgumentParser(
        prog='proman',
        description='Herramienta de línea de comandos para gestionar proyectos Supabase',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Ejemplos:
  proman init                                  # Configurar rutas de binarios
  proman connection register                   # Registrar un proyecto
  proman db backup prod --schema               # Solo el esquema
  proman db clone --source prod --target dev   # Migrar el esquema de prod a dev
  proman db diff prod dev                      # Comparar esquemas en el visor
        """
    )
    parser.add_argument('--config', type=Path, metavar='RUTA',
                        help=f'Archivo de configuración (default: {Config.CONFIG_FILE})')
    parser.add_argument('--verbose', '-v', action='store_true', help='Mostrar mensajes de depuración')

    commands = parser.add_subparsers(dest='command', metavar='COMANDO')

    # connection
    connection = commands.add_parser('connection', help='Gestionar conexiones de proyectos')
    connection_cmds = connection.add_subparsers(dest='subcommand', metavar='SUBCOMANDO', required=True)
    register = connection_cmds.add_parser('register', help='Registrar un proyecto de forma interactiva')
    register.set_defaults(handler=cmd_connection_register, operation='connection register')
    listing = connection_cmds.add_parser('list', help='Listar los proyectos registrados')
    listing.set_defaults(handler=cmd_connection_list, operation='connection list')
    remove = connection_cmds.add_parser('remove', help='Eliminar un proyecto registrado')
    remove.add_argument('id', help='ID del proyecto')
    remove.set_defaults(handler=cmd_connection_remove, operation='connection remove')

    # db
    db = commands.add_parser('db', help='Operaciones de base de datos')
    db_cmds = db.add_subparsers(dest='subcommand', metavar='SUBCOMANDO', required=True)

    backup = db_cmds.add_parser('backup', help='Backup de roles, esquema y datos de un proyecto')
    backup.add_argument('id', help='ID del proyecto')
    backup.add_argument('--roles', action='store_true', help='Volcar roles')
    backup.add_argument('--schema', action='store_true', help='Volcar esquema')
    backup.add_argument('--data', action='store_true', help='Volcar datos')
    backup.add_argument('--prefix', metavar='P', help='Prefijo de los archivos (default: {id}_{fecha})')
    backup.add_argument('--official', action='store_true', help='Usar supabase db dump')
    backup.add_argument('--output-dir', type=Path, metavar='DIR',
                        help=f'Directorio de salida (default: {Config.BACKUP_DIR})')
    backup.set_defaults(handler=cmd_db_backup, operation='db backup')

    exec_cmd = db_cmds.add_parser('exec', help='Ejecutar un archivo SQL con psql')
    exec_cmd.add_argument('id', help='ID del proyecto')
    exec_cmd.add_argument('file', type=Path, help='Archivo .sql')
    exec_cmd.set_defaults(handler=cmd_db_exec, operation='db exec')

    clone = db_cmds.add_parser('clone', help='Migrar el esquema del origen al destino con confirmación')
    clone.add_argument('--source', required=True, metavar='ID', help='Proyecto de origen')
    clone.add_argument('--target', required=True, metavar='ID', help='Proyecto de destino')
    clone.set_defaults(handler=cmd_db_clone, operation='db clone')

    diff = db_cmds.add_parser('diff', help='Comparar los esquemas de dos proyectos en el visor configurado')
    diff.add_argument('source', help='Proyecto de origen')
    diff.add_argument('target', help='Proyecto de destino')
    diff.set_defaults(handler=cmd_db_diff, operation='db diff')

    migration = db_cmds.add_parser('gen-migration', help='Imprimir el SQL que lleva el destino al esquema del origen')
    migration.add_argument('source', help='Proyecto de origen')
    migration.add_argument('target', help='Proyecto de destino')
    migration.set_defaults(handler=cmd_db_gen_migration, operation='db gen-migration')

    types = db_cmds.add_parser('gen-types', help='Generar tipos TypeScript de la base de datos')
    types.add_argument('id', help='ID del proyecto')
    types.set_defaults(handler=cmd_db_gen_types, operation='db gen-types')

    # supabase
    supabase = commands.add_parser('supabase', help='Ejecutar el CLI de Supabase (login u otros subcomandos)')
    supabase.add_argument('args', nargs=argparse.REMAINDER, help='Argumentos para supabase')
    supabase.set_defaults(handler=cmd_supabase, operation='supabase')

    init = commands.add_parser('init', help='Configurar rutas de binarios y visor de diferencias')
    init.set_defaults(handler=cmd_init, operation='init')

    commands.add_parser('help', help='Mostrar esta ayuda')

    return parser


def cmd_connection_register(config_repo: ConfigRepository, args):
    ProjectService(config_repo).register()


def cmd_connection_list(config_repo: ConfigRepository, args):
    """Imprime la tabla de proyectos registrados"""
    rows = ProjectService(config_repo).list_connections()
    if not rows:
        LoggerService.get_logger("Main").warning(
            "No hay proyectos registrados. Usa 'proman connection register' para añadir uno"
        )
        return

    table = [("ID", "HOST", "USER", "DATABASE"), ("--", "----", "----", "--------")]
    table += [(pid, p.host, p.user, p.db_name) for pid, p in rows]
    widths = [max(len(row[i]) for row in table) for i in range(3)]
    for row in table:
        print("  ".join(cell.ljust(width) for cell, width in zip(row, widths)) + "  " + row[3])


def cmd_connection_remove(config_repo: ConfigRepository, args):
    ProjectService(config_repo).remove(args.id)


def cmd_db_backup(config_repo: ConfigRepository, args):
    flags = {BackupKind.ROLES: args.roles, BackupKind.SCHEMA: args.schema, BackupKind.DATA: args.data}
    options = BackupOptions(
        kinds=[kind for kind, selected in flags.items() if selected],
        prefix=args.prefix,
        official=args.official,
        output_dir=args.output_dir
    )
    BackupService(config_repo).backup(args.id, options)


def cmd_db_exec(config_repo: ConfigRepository, args):
    DatabaseService(config_repo).exec_file(args.id, args.file)


def cmd_db_clone(config_repo: ConfigRepository, args):
    CloneService(config_repo).clone(args.source, args.target)


def cmd_db_diff(config_repo: ConfigRepository, args):
    DiffService(config_repo).visual_diff(args.source, args.target)


def cmd_db_gen_migration(config_repo: ConfigRepository, args):
    script = DiffService(config_repo).migration_between(args.source, args.target)
    if not script.strip():
        LoggerService.get_logger("Main").info("Los esquemas ya son idénticos.")
        return
    sys.stdout.write(script)


def cmd_db_gen_types(config_repo: ConfigRepository, args):
    print(SupabaseService(config_repo).gen_types(args.id))


def cmd_supabase(config_repo: ConfigRepository, args):
    service = SupabaseService(config_repo)
    if not args.args:
        raise InvalidArgumentError("'supabase' necesita un subcomando (p. ej. login)")
    if args.args == ['login']:
        service.login()
    else:
        service.passthrough(args.args)


def cmd_init(config_repo: ConfigRepository, args):
    ProjectService(config_repo).init()


def main(argv=None) -> int:
    """
    Función principal

    Args:
        argv: Argumentos (sys.argv[1:] por defecto)

    Returns:
        Código de salida del proceso
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command in (None, 'help'):
        parser.print_help()
        return 0

    if args.verbose:
        LoggerService.set_level(logging.DEBUG)
    logger = LoggerService.get_logger("Main")

    config_repo = ConfigRepository(args.config)
    try:
        config_repo.load()
        config_repo.ensure_exists()
        args.handler(config_repo, args)
    except UserCancelledError as e:
        logger.warning(str(e))
        return 0
    except ProManError as e:
        logger.error(f"✗ {args.operation}: {e}")
        return 1
    except OSError as e:
        # Archivos temporales o de salida fuera de los servicios
        logger.error(f"✗ {args.operation}: error de E/S: {e}")
        return 1
    except EOFError:
        logger.error(f"✗ {args.operation}: entrada interrumpida")
        return 1

    return 0


def run():
    """Entrada del script de consola"""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nPrograma interrumpido por el usuario", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    run()
