"""Tests for the openapi-generator-cli adapter."""

import subprocess
from unittest.mock import patch

import pytest

from opsynth.errors import GenerationError
from opsynth.tools import OpenApiGeneratorAdapter


@pytest.fixture
def document(tmp_path):
    path = tmp_path / "openapi.yaml"
    path.write_text("openapi: 3.1.0\n")
    return path


@pytest.fixture
def adapter(tmp_path, document):
    return OpenApiGeneratorAdapter(
        document_path=document,
        output_dir=tmp_path / "client",
        package_name="generated_client",
    )


def _completed(returncode=0, stdout="", stderr=""):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


class TestBuildCommand:

    def test_command_line(self, adapter, document, tmp_path):
        assert adapter.build_command() == [
            "openapi-generator-cli",
            "generate",
            "-g", "python",
            "-i", str(document.resolve()),
            "-o", str(tmp_path / "client"),
            "--package-name", "generated_client",
        ]

    def test_custom_generator(self, document, tmp_path):
        adapter = OpenApiGeneratorAdapter(
            document, tmp_path / "out", "pkg", generator_name="python-pydantic-v1", command="gen"
        )
        cmd = adapter.build_command()
        assert cmd[0] == "gen"
        assert cmd[cmd.index("-g") + 1] == "python-pydantic-v1"


class TestValidate:

    def test_valid(self, adapter):
        with patch("opsynth.tools.openapi_generator.shutil.which", return_value="/usr/bin/gen"):
            result = adapter.validate()
        assert result == {"valid": True, "errors": [], "warnings": []}

    def test_missing_executable_and_document(self, tmp_path):
        adapter = OpenApiGeneratorAdapter(tmp_path / "missing.yaml", tmp_path / "out", "pkg")
        with patch("opsynth.tools.openapi_generator.shutil.which", return_value=None):
            result = adapter.validate()
        assert result["valid"] is False
        assert len(result["errors"]) == 2

    def test_existing_output_warns(self, adapter):
        adapter.output_dir.mkdir()
        with patch("opsynth.tools.openapi_generator.shutil.which", return_value="/usr/bin/gen"):
            result = adapter.validate()
        assert result["valid"] is True
        assert "will be cleaned" in result["warnings"][0]


class TestExecute:

    def test_success(self, adapter):
        with patch("opsynth.tools.openapi_generator.subprocess.run",
                   return_value=_completed()) as mock_run:
            result = adapter.execute()

        assert result.returncode == 0
        args, kwargs = mock_run.call_args
        assert args[0] == adapter.build_command()
        assert kwargs["capture_output"] is True
        assert kwargs["check"] is False

    def test_cleans_previous_output(self, adapter):
        stale = adapter.output_dir / "generated_client" / "stale.py"
        stale.parent.mkdir(parents=True)
        stale.write_text("")

        with patch("opsynth.tools.openapi_generator.subprocess.run", return_value=_completed()):
            adapter.execute()
        assert not adapter.output_dir.exists()

    def test_nonzero_exit(self, adapter):
        with patch("opsynth.tools.openapi_generator.subprocess.run",
                   return_value=_completed(returncode=1, stderr="bad spec\n")):
            with pytest.raises(GenerationError, match="bad spec") as exc_info:
                adapter.execute()
        assert exc_info.value.returncode == 1

    def test_executable_missing(self, adapter):
        with patch("opsynth.tools.openapi_generator.subprocess.run",
                   side_effect=FileNotFoundError("openapi-generator-cli")):
            with pytest.raises(GenerationError, match="Failed to generate API client"):
                adapter.execute()

    def test_timeout(self, adapter):
        with patch("opsynth.tools.openapi_generator.subprocess.run",
                   side_effect=subprocess.TimeoutExpired(cmd="gen", timeout=5)):
            with pytest.raises(GenerationError):
                adapter.execute(timeout=5)

    def test_missing_document(self, tmp_path):
        adapter = OpenApiGeneratorAdapter(tmp_path / "missing.yaml", tmp_path / "out", "pkg")
        with patch("opsynth.tools.openapi_generator.subprocess.run") as mock_run:
            with pytest.raises(GenerationError, match="not found"):
                adapter.execute()
        mock_run.assert_not_called()
