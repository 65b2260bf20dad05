"""Tests for Rich Console factory and theme."""

from io import StringIO

from curator.output.console import (
    CURATOR_THEME,
    create_console,
    get_output,
    style_for_action,
)


class TestCreateConsole:
    def test_returns_console_with_stringio(self) -> None:
        console = create_console()
        assert isinstance(console.file, StringIO)

    def test_no_color_disables_ansi(self) -> None:
        console = create_console(no_color=True)
        console.print("[bold red]hello[/bold red]")
        output = get_output(console)
        assert "\x1b" not in output
        assert "hello" in output

    def test_custom_width(self) -> None:
        assert create_console(width=80).width == 80

    def test_default_width(self) -> None:
        assert create_console().width == 120

    def test_theme_styles_resolve(self) -> None:
        console = create_console()
        console.print("[curator.action.queued]queued[/curator.action.queued]")
        assert get_output(console) == "queued\n"


class TestTheme:
    def test_action_styles_defined(self) -> None:
        for action in ("filed", "queued", "skipped", "failed"):
            assert f"curator.action.{action}" in CURATOR_THEME.styles

    def test_style_for_action(self) -> None:
        assert style_for_action("filed") == "curator.action.filed"
        assert style_for_action("failed") == "curator.action.failed"
        assert style_for_action("undone") == "curator.action.filed"

    def test_unknown_action(self) -> None:
        assert style_for_action("mystery") == ""
