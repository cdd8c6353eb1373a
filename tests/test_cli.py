import os

import pyperclip
import pytest

from fileagg import __version__
from fileagg.cli import main


def test_stdout_output_is_only_the_aggregate(make_tree, capsys):
    root = make_tree({"a.py": "print(1)"})
    main([str(root), "-s"])
    captured = capsys.readouterr()
    path = os.path.join(str(root), "a.py")
    assert captured.out == f"# File: a.py\n# Path: {path}\nprint(1)\n"
    assert "Processed" in captured.err


def test_writes_default_output_file(make_tree, monkeypatch, capsys):
    root = make_tree({"src/app.js": "run();"})
    monkeypatch.chdir(root)
    main([])
    text = (root / "fileagg_output.txt").read_text(encoding="utf-8")
    assert text == f"// File: app.js\n// Path: {os.path.join('.', 'src', 'app.js')}\nrun();"
    assert "Output written to fileagg_output.txt" in capsys.readouterr().err


def test_output_flag(make_tree, tmp_path_factory):
    root = make_tree({"a.rb": "puts 1"})
    out = tmp_path_factory.mktemp("out") / "agg.txt"
    main([str(root), "--output", str(out)])
    assert out.read_text(encoding="utf-8").startswith("# File: a.rb")


def test_clipboard_flag(make_tree, monkeypatch, capsys):
    copied = []
    monkeypatch.setattr(pyperclip, "copy", copied.append)
    root = make_tree({"a.sh": "echo hi"})
    main([str(root), "-c"])
    assert len(copied) == 1
    assert copied[0].endswith("echo hi")
    assert "copied to the clipboard" in capsys.readouterr().err


def test_stdout_takes_precedence_over_clipboard(make_tree, monkeypatch, capsys):
    copied = []
    monkeypatch.setattr(pyperclip, "copy", copied.append)
    root = make_tree({"a.sh": "echo hi"})
    main([str(root), "-c", "-s"])
    assert copied == []
    assert capsys.readouterr().out.endswith("echo hi\n")


def test_filter_flags(make_tree, capsys):
    root = make_tree(
        {
            ".gitignore": "*.log\n",
            ".hidden.py": "secret",
            "a.py": "a",
            "b.js": "b",
            "c.log": "c",
        }
    )
    main([str(root), "-s", "-f", "py,log"])
    out = capsys.readouterr().out
    assert "File: a.py" in out
    assert "b.js" not in out
    assert "c.log" not in out
    assert ".hidden.py" not in out

    main([str(root), "-s", "-n", "-i", "-f", "py,log"])
    out = capsys.readouterr().out
    assert "File: .hidden.py" in out
    assert "File: c.log" in out
    assert "b.js" not in out


def test_config_flag(make_tree, tmp_path_factory, capsys):
    cfg = tmp_path_factory.mktemp("cfg") / "extra.txt"
    cfg.write_text("docs/\n", encoding="utf-8")
    root = make_tree({"docs/guide.py": "g", "a.py": "a"})
    main([str(root), "-s", "--config", str(cfg)])
    out = capsys.readouterr().out
    assert "guide.py" not in out
    assert "File: a.py" in out


def test_missing_config_file_is_fatal(make_tree, tmp_path_factory, capsys):
    root = make_tree({"a.py": "a"})
    missing = tmp_path_factory.mktemp("cfg") / "missing.txt"
    with pytest.raises(SystemExit) as exc:
        main([str(root), "-s", "--config", str(missing)])
    assert exc.value.code == 1
    captured = capsys.readouterr()
    assert "does not exist" in captured.err
    assert captured.out == ""


def test_invalid_root_fails_before_any_sink(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(SystemExit) as exc:
        main(["does-not-exist"])
    assert exc.value.code == 1
    assert "Path is not a directory: 'does-not-exist'" in capsys.readouterr().err
    assert not (tmp_path / "fileagg_output.txt").exists()


def test_unwritable_output_is_fatal(make_tree, capsys):
    root = make_tree({"a.py": "a", "blocker": "x"})
    with pytest.raises(SystemExit) as exc:
        main([str(root), "-o", str(root / "blocker" / "out.txt")])
    assert exc.value.code == 1
    assert "Could not write to output file" in capsys.readouterr().err


def test_version(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--version"])
    assert exc.value.code == 0
    assert f"fileagg {__version__}" in capsys.readouterr().out


def test_verbose_lists_added_files(make_tree, capsys):
    root = make_tree({"a.py": "a"})
    main([str(root), "-s", "-v"])
    err = capsys.readouterr().err
    assert "Scanning" in err
    assert "+ " + os.path.join(str(root), "a.py") in err
