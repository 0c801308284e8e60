"""End-to-end tests for the install command with fake external tools."""

import pytest
from conftest import answers, make_socket

from dotlib import command_install
from dotlib.command_install import execute_install
from dotlib.errors import MissingSourceError, PrerequisiteError
from dotlib.models import EnvContext


BASH_5 = "GNU bash, version 5.2.26(1)-release\n"


@pytest.fixture
def tools(fake_shell):
    """bash 5 and the code CLI; no git, brew or ssh-add."""
    fake_shell.install("bash")
    fake_shell.install("code")
    fake_shell.respond(["bash", "--version"], stdout=BASH_5)
    return fake_shell


def extension_calls(fake_shell):
    return [call for call in fake_shell.calls if call[:2] == ("code", "--install-extension")]


class TestExecuteInstall:
    """Test execute_install."""

    def test_links_settings_and_creates_keybindings(self, tools, config, context):
        execute_install(config, ask=answers(), context=context)

        user_dir = config.editor_user_dir
        assert (user_dir / "settings.json").resolve() == config.settings_json.resolve()
        assert config.keybindings_json.read_text(encoding="utf-8") == "[]\n"
        assert (user_dir / "keybindings.json").resolve() == config.keybindings_json.resolve()

    def test_rerun_creates_no_backups(self, tools, config, context):
        execute_install(config, ask=answers(), context=context)
        execute_install(config, ask=answers(), context=context)

        assert list(config.editor_user_dir.glob("*.bak.*")) == []

    def test_existing_settings_backed_up(self, tools, config, context):
        config.editor_user_dir.mkdir(parents=True)
        (config.editor_user_dir / "settings.json").write_text('{"mine": 1}', encoding="utf-8")

        execute_install(config, ask=answers(), context=context)

        backups = list(config.editor_user_dir.glob("settings.json.bak.*"))
        assert len(backups) == 1
        assert backups[0].read_text(encoding="utf-8") == '{"mine": 1}'

    def test_installs_extensions(self, tools, config, context):
        config.extensions_txt.write_text("# theme\na.one\n\nb.two\n", encoding="utf-8")

        execute_install(config, ask=answers(), context=context)

        assert [call[-1] for call in extension_calls(tools)] == ["a.one", "b.two"]

    def test_empty_extension_list(self, tools, config, context):
        config.extensions_txt.write_text("", encoding="utf-8")

        execute_install(config, ask=answers(), context=context)

        assert extension_calls(tools) == []

    def test_missing_settings_aborts_before_linking(self, tools, config, context):
        config.settings_json.unlink()

        with pytest.raises(MissingSourceError):
            execute_install(config, ask=answers(), context=context)

        assert not config.editor_user_dir.exists()
        assert not config.keybindings_json.exists()

    def test_missing_vscode_dir_aborts(self, tools, config, context):
        config.settings_json.unlink()
        config.vscode_dir.rmdir()

        with pytest.raises(MissingSourceError):
            execute_install(config, ask=answers(), context=context)

    def test_git_steps_skipped_off_macos(self, tools, config, context, capsys):
        linux = EnvContext(environ=context.environ, home=context.home, system="Linux")

        execute_install(config, ask=answers(), context=linux)

        assert "Git setup is macOS-only" in capsys.readouterr().out

    def test_declined_git_steps_continue(self, tools, config, context):
        tools.install("git", "/usr/bin/git")

        report = execute_install(config, ask=answers("n", "n"), context=context)

        assert report is not None

    def test_closed_stdin_skips_prompts_and_continues(self, tools, config, context, capsys):
        tools.install("git", "/usr/bin/git")
        prompts = []

        def ask(message):
            prompts.append(message)
            raise EOFError

        report = execute_install(config, ask=ask, context=context)

        out = capsys.readouterr().out
        assert len(prompts) == 2
        assert "Optional: Git user identity" in out
        assert "No answer received. Skipping." in out
        assert "Post-install: dotfiles doctor" in out
        assert report.sections

    def test_doctor_runs_with_fix_when_vendor_agent_present(self, tools, config, context):
        vendor = make_socket(config.vendor_socket_root / "2BUA8C4S2C.com.1password" / "t" / "agent.sock")

        report = execute_install(config, ask=answers(), context=context)

        assert report.context.get("SSH_AUTH_SOCK") == str(vendor)

    def test_doctor_errors_are_not_fatal(self, tools, config, context):
        # No brew: the doctor reports an error, install still completes
        report = execute_install(config, ask=answers(), context=context)
        assert report.exit_code == 1


class TestEnsureModernBash:
    """Test the Bash bootstrap."""

    def test_old_bash_installs_from_brew(self, fake_shell, config, context, monkeypatch):
        fake_shell.install("bash", "/bin/bash")
        fake_shell.install("brew")
        fake_shell.respond(["bash", "--version"], stdout="GNU bash, version 3.2.57(1)-release\n")
        commands = []
        monkeypatch.setattr(command_install.subprocess, "run", lambda args, **kwargs: commands.append(args))

        command_install.ensure_modern_bash(config, context)

        assert commands == [["brew", "install", "bash"]]

    def test_old_bash_without_brew_is_fatal(self, fake_shell, config, context):
        fake_shell.install("bash", "/bin/bash")
        fake_shell.respond(["bash", "--version"], stdout="GNU bash, version 3.2.57(1)-release\n")

        with pytest.raises(PrerequisiteError):
            command_install.ensure_modern_bash(config, context)

    def test_modern_bash_is_noop(self, tools, config, context):
        command_install.ensure_modern_bash(config, context)
        assert tools.calls == [("bash", "--version")]
