"""Unit tests for recompilation."""

import json
import subprocess

import pytest

from conftest import SOURCE, SOURCE_PATH

from contract_verification import compiler
from contract_verification.compiler import build_standard_json_input, recompile
from contract_verification.exceptions import CompilationError


def solc_output(bytecode: str = "6080AA", deployed: str = "6080BB", errors=None) -> str:
    output = {
        "contracts": {
            SOURCE_PATH: {
                "Storage": {
                    "evm": {"bytecode": {"object": bytecode}, "deployedBytecode": {"object": deployed}},
                    "metadata": '{"compiler":{}}',
                }
            }
        }
    }
    if errors is not None:
        output["errors"] = errors
    return json.dumps(output)


class FakeRun:
    """Stand-in for subprocess.run recording its invocation."""

    def __init__(self, stdout: str = "", error: Exception = None):
        self.stdout = stdout
        self.error = error
        self.calls = []

    def __call__(self, args, **kwargs):
        self.calls.append((args, kwargs))
        if self.error is not None:
            raise self.error
        return subprocess.CompletedProcess(args, 0, stdout=self.stdout, stderr="")


class TestBuildStandardJsonInput:
    """Test the build_standard_json_input function."""

    def test_reproduces_settings(self, metadata):
        """Test that settings are kept, minus the compilation target."""
        standard_input = build_standard_json_input(metadata, {SOURCE_PATH: SOURCE})

        assert standard_input["language"] == "Solidity"
        assert standard_input["sources"] == {SOURCE_PATH: {"content": SOURCE}}
        assert "compilationTarget" not in standard_input["settings"]
        assert standard_input["settings"]["optimizer"] == {"enabled": False, "runs": 200}
        assert "evm.deployedBytecode.object" in standard_input["settings"]["outputSelection"]["*"]["*"]

    def test_converts_libraries(self, metadata):
        """Test that metadata library names are split into file and name."""
        metadata["settings"]["libraries"] = {"contracts/Lib.sol:Math": "0x" + "11" * 20}

        standard_input = build_standard_json_input(metadata, {SOURCE_PATH: SOURCE})

        assert standard_input["settings"]["libraries"] == {"contracts/Lib.sol": {"Math": "0x" + "11" * 20}}

    def test_hash_mismatch_raises(self, metadata):
        """Test that sources must hash to the metadata's keccak256."""
        with pytest.raises(CompilationError):
            build_standard_json_input(metadata, {SOURCE_PATH: SOURCE + "// changed"})

    def test_missing_source_raises(self, metadata):
        """Test that every metadata source must be supplied."""
        with pytest.raises(CompilationError):
            build_standard_json_input(metadata, {})


class TestRecompile:
    """Test the recompile function."""

    def test_returns_target_artifact(self, monkeypatch, metadata):
        """Test that the compilation target's bytecode is returned 0x-prefixed and lowercase."""
        fake_run = FakeRun(stdout=solc_output())
        monkeypatch.setattr(compiler.subprocess, "run", fake_run)

        artifact = recompile(metadata, {SOURCE_PATH: SOURCE}, solc_path="/opt/solc")

        assert artifact.creation_bytecode == "0x6080aa"
        assert artifact.runtime_bytecode == "0x6080bb"
        assert artifact.metadata == '{"compiler":{}}'
        args, kwargs = fake_run.calls[0]
        assert args == ["/opt/solc", "--standard-json"]
        assert json.loads(kwargs["input"])["sources"][SOURCE_PATH]["content"] == SOURCE

    def test_solc_path_from_environment(self, monkeypatch, metadata):
        """Test that $SOLC_PATH selects the binary."""
        fake_run = FakeRun(stdout=solc_output())
        monkeypatch.setattr(compiler.subprocess, "run", fake_run)
        monkeypatch.setenv("SOLC_PATH", "/usr/local/bin/solc-0.8.4")

        recompile(metadata, {SOURCE_PATH: SOURCE})

        assert fake_run.calls[0][0][0] == "/usr/local/bin/solc-0.8.4"

    def test_compiler_errors_raise(self, monkeypatch, metadata):
        """Test that errors of severity error raise CompilationError."""
        errors = [
            {"severity": "warning", "formattedMessage": "unused variable"},
            {"severity": "error", "formattedMessage": "ParserError: expected ';'"},
        ]
        monkeypatch.setattr(compiler.subprocess, "run", FakeRun(stdout=solc_output(errors=errors)))

        with pytest.raises(CompilationError) as exc_info:
            recompile(metadata, {SOURCE_PATH: SOURCE})

        assert "ParserError" in str(exc_info.value)
        assert "unused variable" not in str(exc_info.value)

    def test_missing_binary_raises(self, monkeypatch, metadata):
        """Test that a missing compiler binary raises CompilationError."""
        monkeypatch.setattr(compiler.subprocess, "run", FakeRun(error=FileNotFoundError("solc")))

        with pytest.raises(CompilationError):
            recompile(metadata, {SOURCE_PATH: SOURCE})

    def test_process_failure_raises(self, monkeypatch, metadata):
        """Test that a non-zero exit raises CompilationError."""
        error = subprocess.CalledProcessError(1, ["solc"], stderr="crash")
        monkeypatch.setattr(compiler.subprocess, "run", FakeRun(error=error))

        with pytest.raises(CompilationError):
            recompile(metadata, {SOURCE_PATH: SOURCE})

    def test_missing_target_raises(self, monkeypatch, metadata):
        """Test that output without the compilation target raises CompilationError."""
        monkeypatch.setattr(compiler.subprocess, "run", FakeRun(stdout=json.dumps({"contracts": {}})))

        with pytest.raises(CompilationError):
            recompile(metadata, {SOURCE_PATH: SOURCE})
