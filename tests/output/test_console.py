"""Tests for Rich Console factory and theme."""

from io import StringIO

from catalogctl.output.console import CATALOG_THEME, create_console, get_output


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

    def test_widths(self) -> None:
        assert create_console().width == 120
        assert create_console(width=80).width == 80

    def test_theme_styles_resolve(self) -> None:
        console = create_console()
        console.print("[cat.id]dom_x[/cat.id] [cat.system]default[/cat.system]")
        assert "dom_x" in get_output(console)
        assert "cat.ok" in CATALOG_THEME.styles
