"""Tests for extension list parsing and installation."""

from dotlib.extensions import install_extensions, parse_extension_list


LIST_TEXT = """\
# Python
ms-python.python

   charliermarsh.ruff
  # indented comment
eamodio.gitlens
ms-python.python
"""


class TestParseExtensionList:
    """Test parse_extension_list."""

    def test_skips_blank_and_comment_lines(self):
        assert parse_extension_list(LIST_TEXT) == [
            "ms-python.python",
            "charliermarsh.ruff",
            "eamodio.gitlens",
            "ms-python.python",
        ]

    def test_empty_text(self):
        assert parse_extension_list("") == []

    def test_last_line_without_newline(self):
        assert parse_extension_list("a.b\nc.d") == ["a.b", "c.d"]


class TestInstallExtensions:
    """Test install_extensions."""

    def test_installs_each_identifier_in_order(self, tmp_path, fake_shell, context):
        fake_shell.install("code")
        list_path = tmp_path / "extensions.txt"
        list_path.write_text(LIST_TEXT, encoding="utf-8")

        result = install_extensions(list_path, "code", context)

        assert fake_shell.calls == [
            ("code", "--install-extension", "ms-python.python"),
            ("code", "--install-extension", "charliermarsh.ruff"),
            ("code", "--install-extension", "eamodio.gitlens"),
            ("code", "--install-extension", "ms-python.python"),
        ]
        assert result.failed == []

    def test_failure_does_not_stop_remaining(self, tmp_path, fake_shell, context):
        fake_shell.install("code")
        fake_shell.failing.add(("code", "--install-extension", "b.two"))
        list_path = tmp_path / "extensions.txt"
        list_path.write_text("a.one\nb.two\nc.three\n", encoding="utf-8")

        result = install_extensions(list_path, "code", context)

        assert [call[-1] for call in fake_shell.calls] == ["a.one", "b.two", "c.three"]
        assert result.installed == ["a.one", "c.three"]
        assert result.failed == ["b.two"]

    def test_empty_list_invokes_nothing(self, tmp_path, fake_shell, context, capsys):
        fake_shell.install("code")
        list_path = tmp_path / "extensions.txt"
        list_path.write_text("", encoding="utf-8")

        result = install_extensions(list_path, "code", context)

        assert fake_shell.calls == []
        assert result.installed == [] and result.failed == []
        assert "Extensions install step done" in capsys.readouterr().out

    def test_missing_list_is_skipped(self, tmp_path, fake_shell, context):
        fake_shell.install("code")
        assert install_extensions(tmp_path / "absent.txt", "code", context) is None
        assert fake_shell.calls == []

    def test_missing_cli_is_skipped(self, tmp_path, fake_shell, context, capsys):
        list_path = tmp_path / "extensions.txt"
        list_path.write_text("a.one\n", encoding="utf-8")

        assert install_extensions(list_path, "code", context) is None
        assert fake_shell.calls == []
        assert "'code' CLI not found" in capsys.readouterr().out
