"""Unit tests for the CLI using typer.testing.CliRunner."""

from pathlib import Path
from unittest.mock import patch

from typer.testing import CliRunner

from hunkpatch.cli import app
from hunkpatch.patching.patch_models import RunSummary

runner = CliRunner()

SCENARIO_PATCH = b"""\
--- a/f
+++ b/f
@@ -1,2 +1,2 @@
-foo
+bar
 baz
"""


def _write_patch(tmp_path: Path, content: bytes = SCENARIO_PATCH) -> Path:
    patch_path = tmp_path / "change.patch"
    patch_path.write_bytes(content)
    return patch_path


class TestPatchCommand:
    """Tests for the hunkpatch command."""

    def test_help_lists_options(self):
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        assert "--strip" in result.output
        assert "--dry-run" in result.output
        assert "--reverse" in result.output

    def test_clean_apply_exits_zero(self, tmp_path: Path):
        (tmp_path / "f").write_bytes(b"foo\nbaz\n")
        patch_path = _write_patch(tmp_path)

        result = runner.invoke(app, ["-i", str(patch_path), "-d", str(tmp_path)])

        assert result.exit_code == 0
        assert "patching file f" in result.output
        assert (tmp_path / "f").read_bytes() == b"bar\nbaz\n"
        assert not (tmp_path / "f.orig").exists()

    def test_reads_patch_from_stdin(self, tmp_path: Path):
        (tmp_path / "f").write_bytes(b"foo\nbaz\n")

        result = runner.invoke(app, ["-d", str(tmp_path)], input=SCENARIO_PATCH)

        assert result.exit_code == 0
        assert (tmp_path / "f").read_bytes() == b"bar\nbaz\n"

    def test_failed_hunk_exits_one(self, tmp_path: Path):
        (tmp_path / "f").write_bytes(b"qux\nbaz\n")
        patch_path = _write_patch(tmp_path)

        result = runner.invoke(app, ["-i", str(patch_path), "-d", str(tmp_path)])

        assert result.exit_code == 1
        assert "hunk #1 FAILED at 1" in result.output
        assert "1 out of 1 hunk FAILED" in result.output
        assert (tmp_path / "f.orig").exists()

    def test_invalid_patch_exits_two(self, tmp_path: Path):
        patch_path = _write_patch(tmp_path, b"--- a/f\nnonsense\n")

        result = runner.invoke(app, ["-i", str(patch_path), "-d", str(tmp_path)])

        assert result.exit_code == 2
        assert "invalid patch" in result.output

    def test_missing_input_exits_two(self, tmp_path: Path):
        result = runner.invoke(app, ["-i", str(tmp_path / "nope.patch"), "-d", str(tmp_path)])
        assert result.exit_code == 2

    def test_reverse_and_strip_options(self, tmp_path: Path):
        (tmp_path / "f").write_bytes(b"bar\nbaz\n")
        patch_path = _write_patch(tmp_path)

        result = runner.invoke(
            app, ["-R", "-p", "1", "-i", str(patch_path), "-d", str(tmp_path)]
        )

        assert result.exit_code == 0
        assert (tmp_path / "f").read_bytes() == b"foo\nbaz\n"

    def test_dry_run_leaves_files_alone(self, tmp_path: Path):
        (tmp_path / "f").write_bytes(b"foo\nbaz\n")
        patch_path = _write_patch(tmp_path)

        result = runner.invoke(
            app, ["--dry-run", "-i", str(patch_path), "-d", str(tmp_path)]
        )

        assert result.exit_code == 0
        assert "patching file f" in result.output
        assert (tmp_path / "f").read_bytes() == b"foo\nbaz\n"
        assert not (tmp_path / "f.orig").exists()

    def test_forward_skips_applied_lines(self, tmp_path: Path):
        (tmp_path / "f").write_bytes(b"bar\nbaz\n")
        patch_path = _write_patch(tmp_path)

        result = runner.invoke(app, ["-N", "-i", str(patch_path), "-d", str(tmp_path)])

        assert result.exit_code == 0
        assert (tmp_path / "f").read_bytes() == b"bar\nbaz\n"

    def test_compat_flags_are_accepted(self, tmp_path: Path):
        (tmp_path / "f").write_bytes(b"foo\nbaz\n")
        patch_path = _write_patch(tmp_path)

        result = runner.invoke(
            app, ["-f", "-E", "-g", "0", "-i", str(patch_path), "-d", str(tmp_path)]
        )

        assert result.exit_code == 0

    def test_backup_mismatch_flags_are_accepted(self, tmp_path: Path):
        patch_path = _write_patch(tmp_path)

        for flag in ("--backup-if-mismatch", "--no-backup-if-mismatch"):
            (tmp_path / "f").write_bytes(b"foo\nbaz\n")
            result = runner.invoke(app, [flag, "-i", str(patch_path), "-d", str(tmp_path)])

            assert result.exit_code == 0, flag
            assert (tmp_path / "f").read_bytes() == b"bar\nbaz\n"

    def test_backup_mismatch_flags_are_hidden(self):
        result = runner.invoke(app, ["--help"])
        assert "backup-if-mismatch" not in result.output

    @patch("hunkpatch.cli.apply_patch_file")
    def test_options_are_passed_through(self, mock_apply, tmp_path: Path):
        mock_apply.return_value = RunSummary()

        result = runner.invoke(
            app,
            ["-p", "0", "-R", "-N", "--dry-run", "-d", str(tmp_path), "-i", "-"],
        )

        assert result.exit_code == 0
        input_path, options, _ = mock_apply.call_args.args
        assert str(input_path) == "-"
        assert options.strip_level == 0
        assert options.reverse is True
        assert options.skip_applied is True
        assert options.dry_run is True
        assert options.directory == tmp_path
