"""Tests for the pyjlines command line."""

import pytest

from pyjlines.cli import main

from conftest import make_class


@pytest.fixture
def class_file(tmp_path):
    path = tmp_path / "Hello.class"
    make_class(methods={"run": [(0, 10), (5, 12)], "other": [(0, 30)]}).write(str(path))
    return path


class TestFileCommand:
    def test_prints_result(self, class_file, capsys):
        main(["file", str(class_file)])
        assert capsys.readouterr().out == f"{class_file}: Hello.src:10-30\n"

    def test_method_filter(self, class_file, capsys):
        main(["file", str(class_file), "--method", "run"])
        assert capsys.readouterr().out == f"{class_file}: Hello.src:10-12\n"

    def test_not_a_class_file(self, tmp_path, capsys):
        path = tmp_path / "junk.class"
        path.write_bytes(b"\x00\x00\x00\x00")
        main(["file", str(path)])
        assert "parse error: not a Java class file" in capsys.readouterr().out

    def test_directory(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["file", str(tmp_path)])
        assert exc_info.value.code == 1
        assert f"Error reading {tmp_path}" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["file", str(tmp_path / "nope.class")])
        assert exc_info.value.code == 1
        assert "File not found" in capsys.readouterr().err


class TestLinesCommand:
    def test_pretty_name(self, classes_dir, capsys):
        main(["lines", "-cp", str(classes_dir), "com.example.Hello"])
        assert capsys.readouterr().out == "com.example/Hello.java:42-47\n"

    def test_method(self, classes_dir, capsys):
        main(["lines", "-cp", str(classes_dir), "-m", "nope", "com.example.Hello"])
        assert capsys.readouterr().out == "com.example.Hello.nope: Hello.java\n"

    def test_missing_class(self, classes_dir, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["lines", "-cp", str(classes_dir), "com.example.Missing", "com.example.Hello"])
        assert exc_info.value.code == 1
        captured = capsys.readouterr()
        assert "Class not found: com.example.Missing" in captured.err
        assert captured.out == "com.example/Hello.java:42-47\n"

    def test_bad_classpath(self, tmp_path, capsys):
        with pytest.raises(SystemExit):
            main(["lines", "-cp", str(tmp_path / "missing.txt"), "Foo"])
        assert "Invalid classpath entry" in capsys.readouterr().err

    def test_no_command(self, capsys):
        with pytest.raises(SystemExit):
            main([])
