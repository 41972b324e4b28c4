"""End-to-end tests for the main.py orchestrator."""
from __future__ import annotations

import csv
import json
from pathlib import Path

import pytest

import main as cli


@pytest.fixture
def env(tmp_path, mods_dir, make_jar, content_files, library_files):
    make_jar("dragon-quests.jar", content_files)
    make_jar("gecko.jar", library_files)
    (mods_dir / "broken.jar").write_bytes(b"nope")
    return {
        "input": mods_dir,
        "output": tmp_path / "out" / "mods",
        "reports": tmp_path / "out" / "reports",
    }


def _argv(env, *extra):
    return [
        "--input", str(env["input"]),
        "--output", str(env["output"]),
        "--reports", str(env["reports"]),
        *extra,
    ]


def _metrics(env):
    with (env["reports"] / "metrics.csv").open("r", encoding="utf-8", newline="") as f:
        return list(csv.DictReader(f))


class TestMain:
    def test_full_run_copies_kept(self, env):
        assert cli.main(_argv(env)) == 0
        assert sorted(p.name for p in env["output"].iterdir()) == ["dragon-quests.jar"]
        copied = (env["output"] / "dragon-quests.jar").read_bytes()
        assert copied == (env["input"] / "dragon-quests.jar").read_bytes()
        assert [r["file"] for r in _metrics(env)] == ["broken.jar", "dragon-quests.jar", "gecko.jar"]

    def test_dry_run_skips_copy(self, env):
        assert cli.main(_argv(env, "--dry-run")) == 0
        assert env["output"].is_dir()
        assert list(env["output"].iterdir()) == []
        assert (env["reports"] / "summary.txt").exists()

    def test_dry_run_clears_previous_output(self, env):
        env["output"].mkdir(parents=True)
        (env["output"] / "stale.jar").write_bytes(b"old")
        assert cli.main(_argv(env, "--dry-run")) == 0
        assert not (env["output"] / "stale.jar").exists()

    def test_reruns_clear_previous_output(self, env):
        env["output"].mkdir(parents=True)
        (env["output"] / "stale.jar").write_bytes(b"old")
        cli.main(_argv(env))
        assert not (env["output"] / "stale.jar").exists()

    def test_extra_keyword_excludes(self, env, make_jar):
        make_jar("wyrm-helpers.jar", {"assets/wyrm/lang/en_us.json": "{}"})
        cli.main(_argv(env, "--dry-run", "--keyword", "helpers"))
        rows = {r["file"]: r for r in _metrics(env)}
        assert rows["wyrm-helpers.jar"]["keep"] == "false"
        assert rows["wyrm-helpers.jar"]["infra_match"] == "true"

    def test_min_signal_flag(self, env):
        cli.main(_argv(env, "--dry-run", "--min-signal", "100"))
        rows = {r["file"]: r for r in _metrics(env)}
        assert rows["dragon-quests.jar"]["keep"] == "true"

    def test_verbose_prints_each_archive(self, env, capsys):
        cli.main(_argv(env, "--dry-run", "--verbose"))
        out = capsys.readouterr().out
        assert "[KEEP] dragon-quests.jar" in out
        assert "[SKIP] broken.jar score=0 (archive open failed)" in out

    def test_config_file(self, env, tmp_path):
        cfg = tmp_path / "params.json"
        cfg.write_text(json.dumps({
            "input": str(env["input"]),
            "output": str(env["output"]),
            "reports": str(env["reports"]),
            "dry_run": True,
        }), encoding="utf-8")
        assert cli.main(["--config", str(cfg)]) == 0
        assert list(env["output"].iterdir()) == []
        assert (env["reports"] / "excluded.csv").exists()


class TestMainErrors:
    def test_missing_input(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc:
            cli.main(["--input", str(tmp_path / "missing"), "--reports", str(tmp_path / "r")])
        assert exc.value.code == 2
        assert "Input not found" in capsys.readouterr().err
        assert not (tmp_path / "r").exists()

    def test_output_would_wipe_input(self, env):
        with pytest.raises(SystemExit) as exc:
            cli.main(_argv(env)[:2] + ["--output", str(env["input"].parent)])
        assert exc.value.code == 2

    def test_negative_min_signal(self, env):
        with pytest.raises(SystemExit) as exc:
            cli.main(_argv(env, "--min-signal", "-1"))
        assert exc.value.code == 2

    def test_bad_config_ignored_with_warning(self, env, tmp_path, capsys):
        cfg = tmp_path / "bad.json"
        cfg.write_text("{oops", encoding="utf-8")
        assert cli.main(_argv(env, "--dry-run", "--config", str(cfg))) == 0
        assert "[WARN] Failed to read config" in capsys.readouterr().err
