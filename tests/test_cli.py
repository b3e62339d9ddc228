"""
Tests unitarios para la gestión de proyectos, el lanzador de procesos y la CLI
"""
import io
import json
import os
import shutil
import subprocess
import sys
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest import mock

os.environ.setdefault("PROMAN_LOG_DIR", tempfile.mkdtemp(prefix="proman_test_logs_"))

# Agregar raíz del proyecto al path
sys.path.insert(0, str(Path(__file__).parent.parent))

import main
from proman.exceptions import (
    ConfigurationIncompleteError,
    DuplicateProjectError,
    ExternalToolError,
    InvalidArgumentError,
    ProjectNotFoundError,
)
from proman.models import ToolPaths
from proman.process import ProcessService
from proman.repositories.config_repository import ConfigRepository
from proman.services.database_service import DatabaseService
from proman.services.project_service import ProjectService
from proman.services.supabase_service import SupabaseService
from tests.fakes import FakeProcessService, full_tool_paths, make_profile


def answers(*values):
    """Función de entrada que devuelve las respuestas en orden"""
    pending = list(values)
    return lambda text: pending.pop(0)


class TestProjectService(unittest.TestCase):
    """Tests para ProjectService"""

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        self.config_file = self.temp_dir / "config.json"
        self.repo = ConfigRepository(self.config_file)
        self.repo.load()

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _saved(self):
        return json.loads(self.config_file.read_text(encoding='utf-8'))

    def test_register_with_defaults(self):
        service = ProjectService(self.repo, answers("prod", "db.example.com", "", "postgres", "pw", "", "abcd"))
        self.assertEqual(service.register(), "prod")

        saved = self._saved()["connections"]["prod"]
        self.assertEqual(saved["port"], "5432")
        self.assertEqual(saved["db_name"], "postgres")
        self.assertEqual(saved["password"], "pw")
        self.assertEqual(saved["supabase_project_id"], "abcd")

    def test_register_duplicate_is_rejected_without_changes(self):
        self.repo.add_or_replace("prod", make_profile())
        self.repo.save()
        before = self.config_file.read_bytes()

        service = ProjectService(self.repo, answers("prod", "other-host", "", "u", "p", "", ""))
        with self.assertRaises(DuplicateProjectError):
            service.register()
        self.assertEqual(self.repo.get("prod"), make_profile())
        self.assertEqual(self.config_file.read_bytes(), before)

    def test_register_empty_id(self):
        with self.assertRaises(InvalidArgumentError):
            ProjectService(self.repo, answers("  ")).register()

    def test_remove(self):
        self.repo.add_or_replace("prod", make_profile())
        service = ProjectService(self.repo)
        service.remove("prod")
        self.assertIsNone(self.repo.get("prod"))
        self.assertEqual(self._saved()["connections"], {})

    def test_remove_unknown_project(self):
        with self.assertRaises(ProjectNotFoundError):
            ProjectService(self.repo).remove("missing")

    def test_list_connections(self):
        self.repo.add_or_replace("prod", make_profile())
        self.repo.add_or_replace("dev", make_profile(host="localhost"))
        rows = ProjectService(self.repo).list_connections()
        self.assertEqual([pid for pid, _ in rows], ["prod", "dev"])

    def test_init_updates_paths_and_editor(self):
        self.repo.set_tool_paths(ToolPaths(psql="/usr/bin/psql"))
        service = ProjectService(self.repo, answers("", "/opt/pg_dump", "/opt/pg_dumpall", "supabase", "Meld"))
        service.init()

        saved = self._saved()
        self.assertEqual(saved["binaries"]["psql"], "/usr/bin/psql")
        self.assertEqual(saved["binaries"]["pg_dump"], "/opt/pg_dump")
        self.assertEqual(saved["binaries"]["supabase"], "supabase")
        self.assertEqual(saved["editor"]["default"], "meld")

    def test_init_ignores_unsupported_editor(self):
        service = ProjectService(self.repo, answers("", "", "", "", "emacs"))
        service.init()
        self.assertEqual(self._saved()["editor"]["default"], "")


class TestProcessService(unittest.TestCase):
    """Tests para ProcessService"""

    def setUp(self):
        self.service = ProcessService()

    def test_empty_path_fails_before_spawning(self):
        with mock.patch("proman.process.subprocess.run") as run:
            with self.assertRaises(ConfigurationIncompleteError):
                self.service.run_captured("pg_dump", "", ["--schema-only"])
            run.assert_not_called()

    def test_unresolvable_path_fails_before_spawning(self):
        with mock.patch("proman.process.shutil.which", return_value=None), \
                mock.patch("proman.process.subprocess.run") as run:
            with self.assertRaises(ConfigurationIncompleteError):
                self.service.run_interactive("psql", "/nope/psql", [])
            run.assert_not_called()

    def test_password_goes_to_environment_only(self):
        completed = subprocess.CompletedProcess([], 0, stdout="ok", stderr="")
        with mock.patch("proman.process.shutil.which", return_value="/usr/bin/pg_dump"), \
                mock.patch("proman.process.subprocess.run", return_value=completed) as run:
            result = self.service.run_captured("pg_dump", "pg_dump", ["-h", "db"], password="s3cret")

        self.assertEqual(result.stdout, "ok")
        command = run.call_args.args[0]
        self.assertEqual(command, ["/usr/bin/pg_dump", "-h", "db"])
        self.assertNotIn("s3cret", command)
        self.assertEqual(run.call_args.kwargs["env"]["PGPASSWORD"], "s3cret")

    def test_non_zero_exit_raises_with_stderr_excerpt(self):
        completed = subprocess.CompletedProcess([], 3, stdout="", stderr="x" * 5000 + "fatal: nope")
        with mock.patch("proman.process.shutil.which", return_value="/usr/bin/pg_dump"), \
                mock.patch("proman.process.subprocess.run", return_value=completed):
            with self.assertRaises(ExternalToolError) as ctx:
                self.service.run_captured("pg_dump", "pg_dump", [])

        error = ctx.exception
        self.assertEqual(error.tool, "pg_dump")
        self.assertEqual(error.exit_code, 3)
        self.assertTrue(error.stderr_excerpt.endswith("fatal: nope"))
        self.assertLessEqual(len(error.stderr_excerpt), 2000)

    def test_spawn_failure_becomes_tool_error(self):
        with mock.patch("proman.process.shutil.which", return_value="/usr/bin/psql"), \
                mock.patch("proman.process.subprocess.run", side_effect=OSError(7, "Argument list too long")):
            with self.assertRaises(ExternalToolError) as ctx:
                self.service.run_captured("psql", "psql", ["-c", "select 1"])
        self.assertEqual(ctx.exception.tool, "psql")
        self.assertIsNone(ctx.exception.exit_code)

    def test_tool_warnings_are_logged_at_info(self):
        completed = subprocess.CompletedProcess([], 0, stdout="", stderr="pg_dump: warning: circular FK\n")
        with mock.patch("proman.process.shutil.which", return_value="/usr/bin/pg_dump"), \
                mock.patch("proman.process.subprocess.run", return_value=completed):
            with self.assertLogs("proman.ProcessService", level="INFO") as logs:
                self.service.run_captured("pg_dump", "pg_dump", [])
        self.assertTrue(any("circular FK" in line for line in logs.output))

    def test_interactive_accepts_ok_codes(self):
        completed = subprocess.CompletedProcess([], 1)
        with mock.patch("proman.process.shutil.which", return_value="/usr/bin/diff"), \
                mock.patch("proman.process.subprocess.run", return_value=completed):
            self.assertEqual(self.service.run_interactive("diff", "diff", [], ok_codes=(0, 1)), 1)
            with self.assertRaises(ExternalToolError):
                self.service.run_interactive("diff", "diff", [])


class TestDirectToolServices(unittest.TestCase):
    """Tests para DatabaseService y SupabaseService"""

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        self.repo = ConfigRepository(self.temp_dir / "config.json")
        self.repo.load()
        self.repo.add_or_replace("prod", make_profile(supabase_project_id="abcd"))
        self.repo.set_tool_paths(full_tool_paths())
        self.process = FakeProcessService(output="export type Database = {}\n")

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_exec_file(self):
        sql_file = self.temp_dir / "seed.sql"
        sql_file.write_text("select 1;")
        DatabaseService(self.repo, self.process).exec_file("prod", sql_file)

        call = self.process.calls[0]
        self.assertEqual(call.mode, "interactive")
        self.assertEqual(call.args[-2:], ["-f", str(sql_file)])
        self.assertEqual(call.password, "s3cret")

    def test_exec_missing_file(self):
        with self.assertRaises(InvalidArgumentError):
            DatabaseService(self.repo, self.process).exec_file("prod", self.temp_dir / "missing.sql")
        self.assertEqual(self.process.calls, [])

    def test_exec_requires_psql(self):
        sql_file = self.temp_dir / "seed.sql"
        sql_file.write_text("select 1;")
        self.repo.set_tool_paths(ToolPaths(pg_dump="pg_dump"))
        with self.assertRaises(ConfigurationIncompleteError):
            DatabaseService(self.repo, self.process).exec_file("prod", sql_file)
        self.assertEqual(self.process.calls, [])

    def test_gen_types(self):
        output = SupabaseService(self.repo, self.process).gen_types("prod")
        self.assertIn("Database", output)
        self.assertEqual(
            self.process.calls[0].args,
            ["gen", "types", "--lang", "typescript", "--project-id", "abcd", "--schema", "public"]
        )

    def test_gen_types_requires_platform_project_id(self):
        self.repo.add_or_replace("dev", make_profile())
        with self.assertRaises(ConfigurationIncompleteError):
            SupabaseService(self.repo, self.process).gen_types("dev")

    def test_passthrough(self):
        SupabaseService(self.repo, self.process).passthrough(["projects", "list"])
        self.assertEqual(self.process.calls[0].args, ["projects", "list"])
        self.assertEqual(self.process.calls[0].mode, "interactive")


class TestMain(unittest.TestCase):
    """Tests para el enrutado de comandos"""

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        self.config_file = self.temp_dir / "config.json"

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def run_main(self, *argv):
        out = io.StringIO()
        with redirect_stdout(out):
            code = main.main(["--config", str(self.config_file), *argv])
        return code, out.getvalue()

    def write_config(self, **binaries):
        repo = ConfigRepository(self.config_file)
        repo.load()
        repo.add_or_replace("prod", make_profile())
        repo.set_tool_paths(ToolPaths(**binaries))
        repo.save()

    def test_help(self):
        code, out = self.run_main("help")
        self.assertEqual(code, 0)
        self.assertIn("connection", out)

    def test_config_is_created_on_first_run(self):
        code, _ = self.run_main("connection", "list")
        self.assertEqual(code, 0)
        self.assertTrue(self.config_file.exists())

    def test_connection_list_prints_table(self):
        self.write_config()
        code, out = self.run_main("connection", "list")
        self.assertEqual(code, 0)
        lines = out.splitlines()
        self.assertTrue(lines[0].startswith("ID"))
        self.assertIn("db.example.com", lines[2])

    def test_unknown_project_exits_with_error(self):
        self.write_config(pg_dump="pg_dump", pg_dumpall="pg_dumpall")
        code, _ = self.run_main("db", "backup", "missing")
        self.assertEqual(code, 1)

    def test_backup_without_binaries_spawns_nothing(self):
        self.write_config()
        with mock.patch("proman.process.subprocess.run") as run:
            code, _ = self.run_main("db", "backup", "prod", "--schema", "--output-dir", str(self.temp_dir))
        self.assertEqual(code, 1)
        run.assert_not_called()

    def test_backup_output_dir_under_regular_file_exits_with_error(self):
        self.write_config(pg_dump="pg_dump")
        blocker = self.temp_dir / "archivo"
        blocker.write_text("x")
        with mock.patch("proman.process.subprocess.run") as run:
            code, _ = self.run_main("db", "backup", "prod", "--schema", "--output-dir", str(blocker / "sub"))
        self.assertEqual(code, 1)
        run.assert_not_called()

    def test_null_fields_in_config_are_listed(self):
        self.config_file.write_text(json.dumps({
            "connections": {"prod": {"host": None, "port": None, "user": "postgres", "password": "p"}}
        }), encoding='utf-8')
        code, out = self.run_main("connection", "list")
        self.assertEqual(code, 0)
        self.assertIn("prod", out)
        self.assertIn("postgres", out)

    def test_malformed_config_exits_with_error(self):
        self.config_file.write_text("{", encoding='utf-8')
        code, _ = self.run_main("connection", "list")
        self.assertEqual(code, 1)

    def test_supabase_requires_subcommand(self):
        code, _ = self.run_main("supabase")
        self.assertEqual(code, 1)

    def test_clone_cancellation_exits_successfully(self):
        self.write_config()
        with mock.patch("main.CloneService") as clone_service:
            from proman.exceptions import UserCancelledError
            clone_service.return_value.clone.side_effect = UserCancelledError("cancelado")
            code, _ = self.run_main("db", "clone", "--source", "prod", "--target", "prod")
        self.assertEqual(code, 0)

    def test_backup_flags_are_forwarded(self):
        self.write_config()
        with mock.patch("main.BackupService") as backup_service:
            code, _ = self.run_main("db", "backup", "prod", "--roles", "--data", "--prefix", "x", "--official")
        self.assertEqual(code, 0)
        project_id, options = backup_service.return_value.backup.call_args.args
        self.assertEqual(project_id, "prod")
        self.assertEqual([k.value for k in options.selected_kinds()], ["roles", "data"])
        self.assertEqual(options.prefix, "x")
        self.assertTrue(options.official)


if __name__ == '__main__':
    unittest.main(verbosity=2)
