import json

import pytest

from proxify import __version__
from proxify.__main__ import main


@pytest.fixture
def docs_file(docs_data, tmp_path):
    docs_data["classes"]["Other.Thing"] = {}
    docs_data["classitems"].append(
        {"class": "p5.Vector", "name": "add", "description": "Again."}
    )
    path = tmp_path / "data.json"
    path.write_text(json.dumps(docs_data), encoding="utf-8")
    return path


def test_check_reports_counts(docs_file, capsys):
    assert main(["check", str(docs_file)]) == 0

    out = capsys.readouterr().out
    assert "Classes    : 5" in out
    assert "Members    : 7" in out
    assert "Unnamed    : 1" in out
    assert "Duplicates : 1" in out
    assert "  - p5.Vector.add" in out
    assert "Unrecognized classes : 1" in out
    assert "  - Other.Thing" in out


def test_check_with_custom_root(docs_file, capsys):
    assert main(["check", str(docs_file), "--root", "Other"]) == 0

    out = capsys.readouterr().out
    assert "Unrecognized classes : 4" in out


def test_check_missing_file(tmp_path, capsys):
    assert main(["check", str(tmp_path / "missing.json")]) == 1

    assert "Error: Cannot read documentation database" in capsys.readouterr().err


def test_no_command_prints_help(capsys):
    assert main([]) == 0

    assert "usage:" in capsys.readouterr().out


def test_info(capsys):
    assert main(["info"]) == 0

    out = capsys.readouterr().out
    assert f"proxify: {__version__}" in out
    assert "pydantic" in out


def test_version(capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(["--version"])

    assert exc_info.value.code == 0
    assert __version__ in capsys.readouterr().out
