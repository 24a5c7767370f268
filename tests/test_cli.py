import json

import pytest

from actionpalette.__main__ import main
from actionpalette.services.logger.std import StdLoggerService


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    # no .env from the working tree, no handler changes on the shared logger
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("ACTIONPALETTE_ENV_FILE", raising=False)
    monkeypatch.setattr(StdLoggerService, "build", staticmethod(lambda cfg=None: None))


def test_list_normal_mode(capsys):
    assert main(["list", "--mode", "n", "--filetype", "python"]) == 0
    out = capsys.readouterr().out

    assert "Chat  [chat] /chat  Open a new chat buffer" in out
    assert "Explain" not in out


def test_list_visual_mode(capsys):
    assert main(["list", "--mode", "V"]) == 0
    assert "Explain  [chat] /explain" in capsys.readouterr().out


def test_render_selection(tmp_path, capsys):
    src = tmp_path / "calc.py"
    src.write_text("def add(a, b):\n    return a + b\n\nprint(add(1, 2))\n", encoding="utf-8")

    assert main(["render", "Explain", "--file", str(src), "--lines", "1:2"]) == 0
    data = json.loads(capsys.readouterr().out)

    assert data["action"] == "Explain"
    assert data["strategy"] == "chat"
    assert "```python\n1:  def add(a, b):\n2:      return a + b\n```" in data["prompts"][1]["text"]
    assert data["blocked"] == []


def test_render_without_send_code(tmp_path, capsys):
    src = tmp_path / "calc.py"
    src.write_text("x = 1\n", encoding="utf-8")

    assert main(["render", "Explain", "--file", str(src), "--lines", "1:1", "--no-send-code"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert [p["role"] for p in data["prompts"]] == ["system"]
    assert data["blocked"] == [{"index": 1, "role": "user"}]


def test_render_unknown_action(capsys):
    assert main(["render", "Nope"]) == 1
    assert "no action named 'Nope'" in capsys.readouterr().err


def test_serve_honours_explicit_port_zero(monkeypatch):
    import uvicorn

    calls = {}
    monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.update(kwargs))

    assert main(["serve", "--port", "0"]) == 0
    assert calls["port"] == 0
    assert calls["host"] == "127.0.0.1"
