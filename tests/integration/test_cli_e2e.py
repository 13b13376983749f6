"""End-to-end CLI integration tests.

Drives the manual round trip as a user would: generate writes a prompt,
the reply is pasted into the response file, extract writes the project.
"""
from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from appforge.application.prompts import render_file_block
from appforge.interface.cli.cli import cli


PROJECT_FILES = {
    "package.json": "{\n  \"name\": \"todo\",\n  \"private\": true\n}\n",
    "index.html": "<!doctype html>\n<div id=\"root\"></div>\n",
    "src/main.jsx": "import App from './App';\n\ncreateRoot(root).render(<App />);\n",
    "src/App.jsx": "export default function App() {\n  return <h1>Todo</h1>;\n}\n",
    "README.md": "# Todo\n\n```bash\nnpm install\nnpm run dev\n```\n",
}


def make_runner() -> CliRunner:
    """Create a CliRunner for CLI tests."""
    return CliRunner()


@pytest.fixture
def cli_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _reply() -> str:
    blocks = [render_file_block(path, content) for path, content in PROJECT_FILES.items()]
    return (
        "Here is the complete project.\n\n"
        + "\n\nNext file:\n\n".join(blocks)
        + "\n\nRun `npm install` and `npm run dev`.\n"
    )


def test_manual_round_trip(cli_env: Path) -> None:
    runner = make_runner()

    generated = runner.invoke(
        cli, ["--json", "generate", "A todo app", "--out", "todo"], prog_name="appforge"
    )
    assert generated.exit_code == 2, generated.output
    awaiting = json.loads(generated.output)
    prompt_path = Path(awaiting["prompt_path"])
    response_path = Path(awaiting["response_path"])
    assert "A todo app" in prompt_path.read_text(encoding="utf-8")

    response_path.write_text(_reply(), encoding="utf-8")

    extracted = runner.invoke(
        cli,
        ["--json", "extract", str(response_path), "--out", "todo"],
        prog_name="appforge",
    )
    assert extracted.exit_code == 0, extracted.output
    obj = json.loads(extracted.output)
    assert [f["path"] for f in obj["files"]] == list(PROJECT_FILES)

    for path, content in PROJECT_FILES.items():
        assert (cli_env / "todo" / path).read_text(encoding="utf-8") == content


def test_update_turn_sends_existing_files(cli_env: Path) -> None:
    runner = make_runner()
    app_dir = cli_env / "todo" / "src"
    app_dir.mkdir(parents=True)
    (app_dir / "App.jsx").write_text("export default App;", encoding="utf-8")

    result = runner.invoke(
        cli, ["generate", "Add a footer", "--out", "todo"], prog_name="appforge"
    )

    assert result.exit_code == 2
    prompt = (cli_env / "generation-prompt.md").read_text(encoding="utf-8")
    assert "```src/App.jsx\nexport default App;\n```" in prompt
    assert "Add a footer" in prompt


def test_update_turn_leaves_out_dependencies_and_binaries(cli_env: Path) -> None:
    project = cli_env / "todo"
    (project / "src").mkdir(parents=True)
    (project / "src" / "App.jsx").write_text("export default App;", encoding="utf-8")
    (project / "node_modules" / "react").mkdir(parents=True)
    (project / "node_modules" / "react" / "index.js").write_text("x" * 200_000, encoding="utf-8")
    (project / "logo.png").write_bytes(bytes(range(256)))

    result = make_runner().invoke(
        cli, ["generate", "Add a page", "--out", "todo"], prog_name="appforge"
    )

    assert result.exit_code == 2
    prompt = (cli_env / "generation-prompt.md").read_text(encoding="utf-8")
    assert "src/App.jsx" in prompt
    assert "node_modules" not in prompt
    assert "logo.png" not in prompt
    assert len(prompt) < 20_000


def test_events_flag_reports_to_stderr(cli_env: Path) -> None:
    config_dir = cli_env / ".appforge"
    config_dir.mkdir()
    (config_dir / "config.yml").write_text(
        "provider: fake\nproviders:\n  fake:\n    reply: \"```a.txt\\nhello\\n```\"\n",
        encoding="utf-8",
    )

    result = make_runner().invoke(
        cli, ["generate", "Anything", "--out", "out", "--events"], prog_name="appforge"
    )

    assert result.exit_code == 0, result.output
    assert "[EVENT] file_written path=a.txt" in result.output
    assert "[EVENT] generation_completed" in result.output
    assert (cli_env / "out" / "a.txt").read_text(encoding="utf-8") == "hello"
