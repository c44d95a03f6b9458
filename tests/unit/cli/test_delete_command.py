"""Unit tests for the delete CLI command."""

from pathlib import Path

from dirops.cli.main import app
from typer.testing import CliRunner

runner = CliRunner()


class TestDeleteCommand:
    """Tests for the delete command."""

    def test_delete_with_yes(self, sample_tree: Path) -> None:
        """--yes deletes without asking."""
        result = runner.invoke(app, ["delete", str(sample_tree), "-p", "*.txt", "--yes"])

        assert result.exit_code == 0
        assert "Deleted 2 file(s)." in result.output
        assert (sample_tree / "b.log").exists()
        assert not (sample_tree / "a.txt").exists()

    def test_confirmation_accepted(self, sample_tree: Path) -> None:
        """Answering yes to the prompt deletes the files."""
        result = runner.invoke(app, ["delete", str(sample_tree), "-p", "*.log"], input="y\n")

        assert result.exit_code == 0
        assert "Delete 1 file(s)" in result.output
        assert not (sample_tree / "b.log").exists()

    def test_confirmation_declined(self, sample_tree: Path) -> None:
        """Declining the prompt leaves everything in place."""
        result = runner.invoke(app, ["delete", str(sample_tree)], input="n\n")

        assert result.exit_code == 0
        assert "Aborted." in result.output
        assert (sample_tree / "a.txt").exists()

    def test_nothing_to_delete(self, sample_tree: Path) -> None:
        """No prompt when nothing matches."""
        result = runner.invoke(app, ["delete", str(sample_tree), "-p", "*.tmp"])

        assert result.exit_code == 0
        assert "No matching files to delete." in result.output

    def test_delete_all(self, sample_tree: Path) -> None:
        """--all removes the directory itself."""
        result = runner.invoke(app, ["delete", str(sample_tree), "--all", "--yes"])

        assert result.exit_code == 0
        assert not sample_tree.exists()

    def test_delete_all_rejects_selection(self, sample_tree: Path) -> None:
        """--all cannot be combined with selection options."""
        result = runner.invoke(app, ["delete", str(sample_tree), "--all", "-p", "*.txt", "-y"])

        assert result.exit_code == 1
        assert sample_tree.exists()

    def test_quiet_hides_statistics(self, sample_tree: Path) -> None:
        """--quiet suppresses the result table."""
        result = runner.invoke(app, ["--quiet", "delete", str(sample_tree), "-y"])

        assert result.exit_code == 0
        assert "Delete Results" not in result.output
        assert list(sample_tree.rglob("*.txt")) == []
