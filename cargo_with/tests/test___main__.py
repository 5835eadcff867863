from unittest.mock import patch

import pytest

from cargo_with import __main__
from cargo_with.shared.errors import AmbiguousArtifact, BuildFailed, EmptyTemplate, SpawnFailure
from cargo_with.selector import ArtifactCandidate


class TestMain:
    @patch("cargo_with.runner.run")
    def test_forwards_to_runner(self, mock_run):
        mock_run.return_value = 0

        result = __main__.main(["gdb --args {bin}", "--", "run", "--release", "--", "x"])

        assert result == 0
        mock_run.assert_called_once_with(
            "gdb --args {bin}",
            ["run", "--release", "--", "x"],
            cargo="cargo",
            verbose=False,
            dry_run=False,
        )

    @patch("cargo_with.runner.run")
    def test_cargo_subcommand_name_dropped(self, mock_run):
        mock_run.return_value = 0

        __main__.main(["with", "echo", "--", "test"])

        assert mock_run.call_args.args == ("echo", ["test"])

    @patch("cargo_with.runner.run")
    def test_options(self, mock_run):
        mock_run.return_value = 0

        __main__.main(["-v", "--dry-run", "--cargo", "/opt/cargo", "echo", "--", "run"])

        assert mock_run.call_args.kwargs == {
            "cargo": "/opt/cargo",
            "verbose": True,
            "dry_run": True,
        }

    @patch("cargo_with.runner.run")
    def test_propagates_exit_status(self, mock_run):
        mock_run.return_value = 42
        assert __main__.main(["echo", "--", "run"]) == 42

    @patch("cargo_with.runner.run")
    def test_missing_separator(self, mock_run, capsys):
        assert __main__.main(["echo {bin}"]) == 2
        mock_run.assert_not_called()
        assert "error:" in capsys.readouterr().err

    def test_empty_cargo_command(self, capsys):
        assert __main__.main(["echo", "--"]) == 2
        assert "Empty cargo command" in capsys.readouterr().err

    def test_missing_command(self):
        with pytest.raises(SystemExit) as excinfo:
            __main__.main(["--", "run"])
        assert excinfo.value.code == 2

    def test_empty_template(self, capsys):
        with patch("subprocess.Popen") as mock_popen:
            assert __main__.main(["", "--", "run"]) == EmptyTemplate().exit_code
            mock_popen.assert_not_called()
        assert "Empty with command" in capsys.readouterr().err

    @pytest.mark.parametrize(
        "error",
        [
            BuildFailed(returncode=101),
            AmbiguousArtifact(
                [ArtifactCandidate("bin", "a", "/a"), ArtifactCandidate("bin", "b", "/b")],
                ["--example", "--bin"],
            ),
            SpawnFailure("gdbx", "No such file or directory"),
        ],
    )
    @patch("cargo_with.runner.run")
    def test_errors_reported(self, mock_run, error, capsys):
        mock_run.side_effect = error

        assert __main__.main(["echo", "--", "run"]) == error.exit_code
        assert capsys.readouterr().err == f"error: {error.message}\n"

    @patch("cargo_with.runner.run")
    def test_keyboard_interrupt(self, mock_run):
        mock_run.side_effect = KeyboardInterrupt

        assert __main__.main(["echo", "--", "run"]) == 130
