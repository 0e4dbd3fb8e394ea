"""
Tests for the command line interface.

Run with: pytest tests/test_cli.py -v
"""
import json
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from conftest import ScriptedProvider
from smarttrans import pipeline
from smarttrans.translate import main
from smarttrans.utils.exceptions import ProviderAuthFailure


@pytest.fixture
def scripted(monkeypatch):
    """Route every session to a scripted provider."""
    provider = ScriptedProvider(default=lambda texts: [t.upper() for t in texts])
    monkeypatch.setattr(pipeline, "create_provider", lambda config: provider)
    return provider


class TestCLI:
    def test_parse(self, capsys, tmp_path):
        code = main(["--config", str(tmp_path / "none.yaml"), "parse",
                     "{player:gender(male,female):He|She} found {count:plural:{item}|{items}}"])
        out = capsys.readouterr().out
        assert code == 0
        assert "Carrier: %VAR_0% found %VAR_1%" in out
        assert "gender" in out
        assert "'items'" in out

    def test_text(self, capsys, tmp_path, scripted):
        code = main(["--config", str(tmp_path / "none.yaml"), "text", "Hello {name}", "-l", "German"])
        assert code == 0
        assert "German: HELLO {name}" in capsys.readouterr().out

    def test_file(self, tmp_path, scripted):
        input_path = tmp_path / "strings.json"
        output_path = tmp_path / "out" / "translated.json"
        input_path.write_text(json.dumps({"greet": "Hello {name}", "bye": "Bye"}), encoding="utf-8")

        code = main(["--config", str(tmp_path / "none.yaml"), "file",
                     str(input_path), str(output_path), "-l", "German", "Klingon"])
        data = json.loads(output_path.read_text(encoding="utf-8"))

        assert code == 1
        assert data["German"] == {"greet": "HELLO {name}", "bye": "BYE"}
        assert data["Klingon"] == {"greet": None, "bye": None}

    def test_text_failure_exit_code(self, monkeypatch, tmp_path):
        provider = ScriptedProvider(failing_codes={"DE": ProviderAuthFailure("bad key")})
        monkeypatch.setattr(pipeline, "create_provider", lambda config: provider)
        assert main(["--config", str(tmp_path / "none.yaml"), "text", "Hello", "-l", "German"]) == 1

    def test_bad_config(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("translation: [oops\n", encoding="utf-8")
        assert main(["--config", str(path), "parse", "x"]) == 2

    def test_unknown_provider(self, tmp_path):
        assert main(["--config", str(tmp_path / "none.yaml"), "--provider", "babelfish",
                     "text", "Hello", "-l", "German"]) == 2


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
