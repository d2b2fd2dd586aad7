"""Executable Textual app showing a buffer with relative line numbers."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Callable, Optional, Sequence

try:  # pragma: no cover - imported only when demo is run
    from rich.text import Text
    from textual import events
    from textual.app import App, ComposeResult
    from textual.widgets import Footer, Header, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use relative_gutter.adapters.textual.app"
    ) from exc

from relative_gutter.buffer import Buffer, MarginDecorations, Window
from relative_gutter.config import GutterSettings
from relative_gutter.engine import UpdateScheduler, ViewportAnnotationEngine
from relative_gutter.runtime import telemetry

from .controller import GutterFrame, TextualGutterAdapter, TextualGutterHooks

SAMPLE_TEXT = "".join(
    f"{n:>3}: move the cursor with the arrow keys, F2 toggles numbering\n"
    for n in range(1, 201)
)


class CallLaterScheduler:
    """Idle scheduler backed by ``App.call_later``."""

    def __init__(self, app: App) -> None:
        self.app = app

    def schedule(self, callback: Callable[[], None]) -> None:
        self.app.call_later(callback)


class StatusChannel:
    """Error channel that writes to the status line."""

    def __init__(self, app: "GutterApp") -> None:
        self.app = app

    def report(self, message: str) -> None:
        self.app.update_status(message)


class GutterApp(App[None]):
    """Minimal Textual UI embedding the relative gutter engine."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#buffer-view {
		height: 1fr;
		border: round $accent;
		padding: 0 1;
		overflow: hidden;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+c", "quit", "Quit"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, *, text: str, settings: GutterSettings) -> None:
        super().__init__()
        self._text = text
        self.settings = settings
        self.adapter: TextualGutterAdapter | None = None
        self._buffer_widget: Static | None = None
        self._status_widget: Static | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        self._buffer_widget = Static("", id="buffer-view")
        yield self._buffer_widget
        self._status_widget = Static("", id="status-line")
        yield self._status_widget
        yield Footer()

    def on_mount(self) -> None:
        buffer = Buffer.from_text(self._text, name="demo")
        window = Window(buffer, height=self._view_height(), name="main")
        decorations = MarginDecorations()
        engine = ViewportAnnotationEngine(
            decorations, settings=self.settings, errors=StatusChannel(self)
        )
        scheduler = UpdateScheduler(engine, CallLaterScheduler(self))
        hooks = TextualGutterHooks(
            update_view=self._update_view,
            update_status=self.update_status,
            log=self._log_line,
        )
        self.adapter = TextualGutterAdapter(scheduler, window, decorations, hooks)
        self.adapter.enable()

    def on_resize(self, event: events.Resize) -> None:
        if self.adapter:
            self.adapter.resize(self._view_height())

    def on_key(self, event: events.Key) -> None:
        if not self.adapter or event.key in {"ctrl+c", "ctrl+q"}:
            return
        if self.adapter.handle_textual_key(event.key, text=event.character):
            event.stop()

    def on_mouse_scroll_down(self, event: events.MouseScrollDown) -> None:
        if self.adapter:
            self.adapter.scroll(3)

    def on_mouse_scroll_up(self, event: events.MouseScrollUp) -> None:
        if self.adapter:
            self.adapter.scroll(-3)

    def update_status(self, status: str) -> None:
        if self._status_widget:
            self._status_widget.update(status)

    def _view_height(self) -> int:
        if self._buffer_widget is None:
            return 10
        return max(self._buffer_widget.content_size.height, 1)

    def _update_view(self, frame: GutterFrame) -> None:
        if self._buffer_widget is None:
            return
        view = Text()
        for row in frame.rows:
            if frame.margin_width:
                style = "bold yellow" if row.current else "dim cyan"
                view.append(f"{row.margin} ", style=style)
            view.append(row.text)
            view.append("\n")
        self._buffer_widget.update(view)
        line, column = frame.cursor
        self.update_status(f"Ln {line}, Col {column}")

    def _log_line(self, line: str) -> None:
        telemetry.get_logger("relative_gutter.textual").debug(line)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    defaults = GutterSettings.from_env()
    parser = argparse.ArgumentParser(
        description="Browse a file with relative line numbers in the margin."
    )
    parser.add_argument("path", nargs="?", help="File to open (default: sample)")
    parser.add_argument(
        "--format",
        default=defaults.format,
        help="'dynamic' or a printf pattern such as '%%3d' (default: dynamic)",
    )
    parser.add_argument(
        "--no-eager",
        action="store_true",
        help="Only renumber on scroll and line-changing edits",
    )
    parser.add_argument(
        "--delay",
        action="store_true",
        default=defaults.delay,
        help="Renumber on idle instead of after every command",
    )
    parser.add_argument(
        "--current-symbol",
        default=defaults.current_symbol,
        help="Text shown on the cursor line instead of 0",
    )
    parser.add_argument(
        "--absolute",
        action="store_true",
        help="Show absolute line numbers",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    defaults = GutterSettings.from_env()
    args = _parse_args(argv)
    text = Path(args.path).read_text(encoding="utf-8") if args.path else SAMPLE_TEXT
    settings = GutterSettings(
        format=args.format,
        eager=defaults.eager and not args.no_eager,
        delay=args.delay,
        current_symbol=args.current_symbol,
        offset=defaults.offset,
        relative=defaults.relative and not args.absolute,
    )
    telemetry.configure(preset="silent")
    GutterApp(text=text, settings=settings).run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
