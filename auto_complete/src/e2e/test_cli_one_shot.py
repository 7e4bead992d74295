import json
from pathlib import Path
import pytest
from frontend.__main__ import main

@pytest.mark.e2e
def test_cli_type_and_accept_json(tmp_path: Path, capsys):
    db = f"sqlite:///{tmp_path / 'cli.sqlite'}"
    assert main(["--db", db, "--no-llm", "--type", "I want to", "--json"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["currentText"] == "I want to"
    assert out["isWordComplete"] is False
    assert out["suggestions"] and all(s.startswith("to") for s in out["suggestions"])

    assert main(["--db", db, "--no-llm", "--type", "he", "--accept", "hello", "--json"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["currentText"] == "hello"
    assert out["isWordComplete"] is True

@pytest.mark.e2e
def test_cli_plain_output(capsys):
    assert main(["--db", "memory://", "--no-llm", "--type", "the "]) == 0
    text = capsys.readouterr().out
    assert "next word" in text
    assert "1. cat" in text
