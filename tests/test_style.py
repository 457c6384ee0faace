"""Run tools/check_style.py over the package source."""

from __future__ import annotations

import importlib.util


def load_checker(repo_root):
    spec = importlib.util.spec_from_file_location("check_style", repo_root / "tools" / "check_style.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_source_is_clean(repo_root):
    checker = load_checker(repo_root)
    files = checker.find_python_files(str(repo_root / "src"))
    assert files
    for path in files:
        assert checker.check_file(path) == [], path


def test_detects_banned(repo_root, tmp_path):
    checker = load_checker(repo_root)
    bad = tmp_path / "bad.py"
    bad.write_text(
        "import os\nimport shlex\nimport subprocess\n"
        "subprocess.run('ls', shell=True)\nos.system('ls')\n"
    )
    lines = [lineno for lineno, _ in checker.check_file(str(bad))]
    assert set(lines) == {2, 4, 5}


def test_from_import_and_main_exit_status(repo_root, tmp_path, capsys):
    checker = load_checker(repo_root)
    (tmp_path / "ok.py").write_text("import subprocess\nsubprocess.run(['ls'])\n")
    assert checker.main([str(tmp_path)]) == 0
    (tmp_path / "bad.py").write_text("from shlex import quote\n")
    assert checker.main([str(tmp_path)]) == 1
    assert "bad.py:1: shlex import" in capsys.readouterr().out
