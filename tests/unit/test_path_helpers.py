"""Unit tests for path helper functions."""

from pathlib import Path

from selora_deployments.paths import (
    get_default_artifacts_dir,
    get_default_constants_path,
    get_default_output_dir,
    get_state_path,
)


class TestDefaultDirs:
    """Test the default location helpers."""

    def test_default_output_dir_in_cwd(self, tmp_path: Path, monkeypatch):
        """Test that state records default to ./scripts/deployments."""
        monkeypatch.delenv("SELORA_DEPLOYMENTS_DIR", raising=False)
        monkeypatch.chdir(tmp_path)

        assert get_default_output_dir() == tmp_path / "scripts" / "deployments"

    def test_output_dir_from_environment(self, tmp_path: Path, monkeypatch):
        """Test that $SELORA_DEPLOYMENTS_DIR overrides the default."""
        monkeypatch.setenv("SELORA_DEPLOYMENTS_DIR", str(tmp_path / "out"))

        assert get_default_output_dir() == tmp_path / "out"

    def test_default_artifacts_dir(self, tmp_path: Path, monkeypatch):
        """Test that artifacts default to ./artifacts."""
        monkeypatch.delenv("SELORA_ARTIFACTS_DIR", raising=False)
        monkeypatch.chdir(tmp_path)

        assert get_default_artifacts_dir() == tmp_path / "artifacts"

    def test_default_constants_path(self, tmp_path: Path, monkeypatch):
        """Test that the constants table defaults to ./scripts/constants.json."""
        monkeypatch.delenv("SELORA_CONSTANTS_PATH", raising=False)
        monkeypatch.chdir(tmp_path)

        assert get_default_constants_path() == tmp_path / "scripts" / "constants.json"

    def test_relative_env_path_converted_to_absolute(self, tmp_path: Path, monkeypatch):
        """Test that relative environment overrides become absolute."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("SELORA_ARTIFACTS_DIR", "build/artifacts")

        result = get_default_artifacts_dir()
        assert result.is_absolute()
        assert result == tmp_path / "build" / "artifacts"


class TestGetStatePath:
    """Test the get_state_path function."""

    def test_file_name_from_chain_id(self, tmp_path: Path):
        """Test that the record is named CoreOutput-<chain_id>.json."""
        path = get_state_path(11155111, tmp_path)

        assert path == tmp_path / "CoreOutput-11155111.json"

    def test_custom_output_dir_as_string(self, tmp_path: Path):
        """Test that the output directory can be provided as a string."""
        path = get_state_path(1, str(tmp_path))

        assert path.parent == tmp_path
        assert path.name == "CoreOutput-1.json"

    def test_none_output_dir_uses_default(self, tmp_path: Path, monkeypatch):
        """Test that None falls back to the default output directory."""
        monkeypatch.setenv("SELORA_DEPLOYMENTS_DIR", str(tmp_path))

        assert get_state_path(31337) == tmp_path / "CoreOutput-31337.json"

    def test_same_chain_id_same_path(self, tmp_path: Path):
        """Test that two aliases of one chain converge on one record."""
        assert get_state_path(100, tmp_path) == get_state_path(100, tmp_path)
        assert get_state_path(100, tmp_path) != get_state_path(10, tmp_path)
