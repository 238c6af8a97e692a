import json
import os

import pytest

from knotcrypt.cli import main, printable
from knotcrypt.config import ENV_PASSWORD, MAGIC


@pytest.fixture
def workspace(tmp_path, monkeypatch, write_config):
    """tmp_path/tool is the working directory, tmp_path is the search root."""
    tool = tmp_path / "tool"
    tool.mkdir()
    monkeypatch.chdir(tool)
    monkeypatch.setenv(ENV_PASSWORD, "correct horse")

    docs = tmp_path / "docs"
    docs.mkdir()
    (docs / "a.txt").write_bytes(b"alpha")
    (docs / "b.md").write_bytes(b"bravo")
    (tool / "own.txt").write_bytes(b"never touched")
    (tmp_path / "cache").mkdir()
    (tmp_path / "cache" / "c.txt").write_bytes(b"cached")

    write_config({"extensions": [".txt"], "skip_folders": ["cache"]}, directory=tool)
    return tmp_path


def test_help(capsys):
    assert main([]) == 0
    assert "COMMANDS" in capsys.readouterr().out


def test_encrypt_decrypt_clean_flow(workspace, monkeypatch, capsys):
    docs = workspace / "docs"

    assert main(["encrypt"]) == 0
    assert (docs / "a.txt.knot").read_bytes()[:8] == MAGIC
    assert not (docs / "b.md.knot").exists()
    assert not (workspace / "cache" / "c.txt.knot").exists()
    assert not (workspace / "tool" / "own.txt.knot").exists()
    assert (workspace / "tool" / "refs" / "a.txt").exists()

    (docs / "a.txt").unlink()
    assert main(["decrypt"]) == 0
    assert (docs / "a.txt").read_bytes() == b"alpha"

    (docs / "evil.knot").write_bytes(b"not really")
    monkeypatch.setattr("builtins.input", lambda prompt="": " Yes ")
    assert main(["clean"]) == 0

    assert not (docs / "a.txt.knot").exists()
    assert (docs / "evil.knot").exists()
    out = capsys.readouterr().out
    assert "Skipped" in out


def test_clean_cancelled(workspace, monkeypatch, capsys):
    assert main(["encrypt"]) == 0
    monkeypatch.setattr("builtins.input", lambda prompt="": "no")

    assert main(["clean"]) == 0
    assert (workspace / "docs" / "a.txt.knot").exists()
    assert "Operation cancelled." in capsys.readouterr().out


def test_clean_nothing_found(workspace, capsys):
    assert main(["clean"]) == 0
    assert "No .knot files found." in capsys.readouterr().out


def test_dry_run_writes_nothing(workspace, monkeypatch):
    monkeypatch.delenv(ENV_PASSWORD)
    assert main(["encrypt", "--dry-run"]) == 0
    assert not (workspace / "docs" / "a.txt.knot").exists()


def test_decrypt_with_wrong_password_still_exits_zero(workspace, monkeypatch):
    assert main(["encrypt"]) == 0
    (workspace / "docs" / "a.txt").unlink()

    monkeypatch.setenv(ENV_PASSWORD, "wrong")
    assert main(["decrypt"]) == 0
    assert (workspace / "docs" / "a.txt").read_bytes() != b"alpha"


def test_missing_config_exits_one(workspace, capsys):
    assert main(["encrypt", "-c", "missing.json"]) == 1
    assert "Unable to open config file" in capsys.readouterr().err


def test_malformed_config_exits_one(workspace):
    (workspace / "tool" / "config.json").write_text("{ not json", encoding="utf-8")
    assert main(["encrypt"]) == 1
    assert not (workspace / "docs" / "a.txt.knot").exists()


def test_bad_root_exits_one(workspace):
    assert main(["decrypt", "--root", str(workspace / "nowhere")]) == 1


def test_scan_lists_targets_and_notes(workspace, capsys):
    assert main(["scan"]) == 0
    out = capsys.readouterr().out
    assert str(workspace / "docs" / "a.txt") in out
    assert "skipped folder" in out


def test_inspect(workspace, capsys):
    assert main(["encrypt"]) == 0
    capsys.readouterr()

    assert main(["inspect", str(workspace / "docs" / "a.txt.knot")]) == 0
    out = capsys.readouterr().out
    assert "Payload:    5 bytes" in out

    assert main(["inspect", str(workspace / "docs" / "a.txt")]) == 1


def _undecodable_name(directory, raw):
    path = directory / os.fsdecode(raw)
    try:
        path.write_bytes(b"junk that only looks encrypted")
    except (OSError, UnicodeEncodeError):
        pytest.skip("filesystem rejects non-UTF-8 file names")
    return path


def test_printable_escapes_undecodable_bytes():
    assert printable(os.fsdecode(b"odd\xff.txt")) == "odd\\xff.txt"
    assert printable("plain ✓") == "plain ✓"
    assert printable("lone \ud800") == "lone \\ud800"


def test_decrypt_survives_undecodable_file_name(workspace, capsys):
    docs = workspace / "docs"
    assert main(["encrypt"]) == 0
    (docs / "a.txt").unlink()
    odd = _undecodable_name(docs, b"odd\xff.txt.knot")
    capsys.readouterr()

    assert main(["decrypt"]) == 0
    assert (docs / "a.txt").read_bytes() == b"alpha"
    assert odd.exists()

    out = capsys.readouterr().out
    assert "odd\\xff.txt.knot" in out
    assert "Skipped" in out


def test_clean_survives_undecodable_file_name(workspace, monkeypatch):
    docs = workspace / "docs"
    assert main(["encrypt"]) == 0
    odd = _undecodable_name(docs, b"odd\xff.txt.knot")
    monkeypatch.setattr("builtins.input", lambda prompt="": "y")

    assert main(["clean"]) == 0
    assert not (docs / "a.txt.knot").exists()
    assert odd.exists()


def test_clean_with_closed_stdin_cancels(workspace, monkeypatch, capsys):
    assert main(["encrypt"]) == 0

    def closed_stdin(prompt=""):
        raise EOFError

    monkeypatch.setattr("builtins.input", closed_stdin)

    assert main(["clean"]) == 0
    assert (workspace / "docs" / "a.txt.knot").exists()
    assert "Operation cancelled." in capsys.readouterr().out


def test_encrypt_reports_skipped_entries_without_verbose(workspace, capsys):
    missing = workspace / "tool" / "missing.txt"
    (workspace / "tool" / "config.json").write_text(
        json.dumps(
            {
                "extensions": [".txt"],
                "skip_folders": ["cache"],
                "specific_files": [str(missing)],
            }
        ),
        encoding="utf-8",
    )

    assert main(["encrypt", "--dry-run"]) == 0
    out = capsys.readouterr().out
    assert f"Skipping {workspace / 'cache'} (skipped folder (matches 'cache'))" in out
    assert f"Skipping {missing} (not a regular file)" in out
