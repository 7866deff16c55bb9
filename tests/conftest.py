"""
pytest configuration and fixtures for datesort tests.
"""

import io
import os
import sys
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List

import pytest


@dataclass
class CliResult:
    """Result from running CLI command."""
    exit_code: int
    output: str
    error: str


def set_mtime(path: Path, when: datetime) -> None:
    """Set both access and modification time of `path` to local time `when`."""
    stamp = when.timestamp()
    os.utime(path, (stamp, stamp))


@pytest.fixture
def source_dir(tmp_path):
    path = tmp_path / "source"
    path.mkdir()
    return path


@pytest.fixture
def target_dir(tmp_path):
    return tmp_path / "target"


@pytest.fixture
def create_test_files(source_dir):
    """Helper to create test files with specific properties."""

    def create_files(file_specs: List[dict], directory: Path = None) -> Path:
        """Create test files based on specifications.

        Args:
            file_specs: List of dicts with keys:
                - name: filename
                - content: file content (optional, defaults to the name)
                - mtime: modification time as datetime (optional)
            directory: where to create them (defaults to the source dir)

        Returns:
            Path to directory containing created files
        """
        directory = directory or source_dir
        directory.mkdir(parents=True, exist_ok=True)

        for spec in file_specs:
            file_path = directory / spec['name']
            file_path.parent.mkdir(parents=True, exist_ok=True)

            content = spec.get('content', spec['name'])
            if isinstance(content, str):
                file_path.write_text(content)
            else:
                file_path.write_bytes(content)

            if 'mtime' in spec:
                set_mtime(file_path, spec['mtime'])

        return directory

    return create_files


@pytest.fixture
def test_config_path(tmp_path):
    """Isolated preferences file for CLI runs."""
    return tmp_path / "prefs" / "config.yml"


@pytest.fixture
def cli_runner(test_config_path):
    """Create a CLI runner that captures output and uses test config."""

    def run_cli(*args, config_path=None, answer="n"):
        """Run datesort CLI with given arguments.

        Args:
            *args: Command line arguments (source, target, --flags, etc)
            config_path: Optional preferences path (defaults to test_config_path)
            answer: Reply given to the confirmation prompt

        Returns:
            CliResult with exit_code, output, and error
        """
        from datesort.cli import main
        from datesort.constants import get_console

        old_stdout = sys.stdout
        old_stderr = sys.stderr
        stdout = io.StringIO()
        stderr = io.StringIO()

        console = get_console()
        had_input = 'input' in vars(console)

        try:
            sys.stdout = stdout
            sys.stderr = stderr

            # Avoid hanging on confirmation prompts
            console.input = lambda prompt="": answer

            exit_code = main(config_path=config_path or test_config_path,
                             argv=[str(a) for a in args])

            return CliResult(
                exit_code=exit_code,
                output=stdout.getvalue(),
                error=stderr.getvalue()
            )
        except SystemExit as e:
            return CliResult(
                exit_code=e.code if e.code is not None else 0,
                output=stdout.getvalue(),
                error=stderr.getvalue()
            )
        finally:
            sys.stdout = old_stdout
            sys.stderr = old_stderr
            if not had_input:
                del console.input

    return run_cli


@pytest.fixture
def assert_file_structure():
    """Helper to assert expected file structure."""

    def check_structure(base_path: Path, expected_structure: dict):
        """Assert that directory has expected structure.

        Args:
            base_path: Root directory to check
            expected_structure: Dict describing expected structure
                e.g., {
                    "2024": {
                        "01": ["file1.jpg", "file2.jpg"],
                    },
                    "2023": ["file3.jpg"]
                }
        """
        def check_level(path: Path, structure: dict):
            for name, value in structure.items():
                item_path = path / name
                assert item_path.exists(), f"Expected {item_path} to exist"
                assert item_path.is_dir(), f"Expected {item_path} to be a directory"

                if isinstance(value, dict):
                    check_level(item_path, value)
                else:
                    actual_files = sorted(f.name for f in item_path.iterdir() if f.is_file())
                    expected_files = sorted(value)
                    assert actual_files == expected_files, \
                        f"Expected files {expected_files} in {item_path}, got {actual_files}"

        check_level(base_path, expected_structure)

    return check_structure
