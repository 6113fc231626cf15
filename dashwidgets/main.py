import curses
import datetime
import time as time_module

import dashwidgets.core.base as base
import dashwidgets.core.terminal as terminal
from dashwidgets.core.calendar import CalendarEngine
from dashwidgets.core.geometry import Rect
from dashwidgets.core.router import DashboardGeometry, InteractionRouter, StateDelta
from dashwidgets.core.store import open_stores
from dashwidgets.core.tasks import TaskListEngine
from dashwidgets.widgets import calendar_widget, todo_widget

TICK_INTERVAL: float = 1.0  # seconds
POPUP_HEIGHT: int = 5


class RedrawFlag:
    """Redraw sink handed to the router; the loop redraws once per pending request"""

    def __init__(self) -> None:
        self.pending: bool = True

    def request(self) -> None:
        self.pending = True

    def consume(self) -> bool:
        pending, self.pending = self.pending, False
        return pending


class DragTracker:
    def __init__(self) -> None:
        self.anchor: tuple[int, int] | None = None

    @property
    def active(self) -> bool:
        return self.anchor is not None

    def begin(self, screen_y: int, screen_x: int) -> None:
        self.anchor = (screen_y, screen_x)

    def finish(
            self,
            canvas: terminal.Canvas,
            screen_y: int,
            screen_x: int,
            max_y: int,
            max_x: int
    ) -> bool:
        """Move the canvas by the drag distance, returns True if it moved"""
        if self.anchor is None:
            return False
        anchor_y, anchor_x = self.anchor
        self.anchor = None
        return canvas.move_by(screen_y - anchor_y, screen_x - anchor_x, max_y, max_x)


def dispatch_mouse(
        router: InteractionRouter,
        canvas: terminal.Canvas,
        drag: DragTracker,
        width: int,
        screen_y: int,
        screen_x: int,
        b_state: int,
        screen_size: tuple[int, int]
) -> StateDelta | None:
    local_y, local_x = canvas.to_local(screen_y, screen_x)
    inside = Rect(0, 0, width, router.height).contains(local_x, local_y)

    if b_state & (terminal.CursesKeys.BUTTON1_PRESSED | terminal.CursesKeys.BUTTON1_CLICKED):
        if not inside:
            return None
        delta = router.click(local_x, local_y, width)
        if delta.begin_drag and b_state & terminal.CursesKeys.BUTTON1_PRESSED:
            drag.begin(screen_y, screen_x)
        return delta

    if b_state & terminal.CursesKeys.BUTTON1_RELEASED:
        if drag.active:
            screen_height, screen_width = screen_size
            if drag.finish(canvas, screen_y, screen_x, screen_height - router.height, screen_width - width):
                router.leave()
        return None

    if b_state & terminal.CursesKeys.REPORT_MOUSE_POSITION:
        if inside:
            router.motion(local_x, local_y, width)
        elif router.calendar.hovered_day is not None or router.tasks.hovered_index is not None:
            router.leave()
    return None


def settle_delta(
        router: InteractionRouter,
        canvas: terminal.Canvas,
        width: int,
        delta: StateDelta | None,
        screen_size: tuple[int, int]
) -> bool:
    """Keep a resized dashboard on screen, returns False if the store write failed"""
    if delta is None:
        return True
    if delta.resized:
        screen_height, screen_width = screen_size
        canvas.move_by(0, 0, screen_height - router.height, screen_width - width)
    return delta.saved


def popup_rect(geometry: DashboardGeometry) -> Rect:
    height = min(POPUP_HEIGHT, geometry.height)
    return Rect(1, max(0, (geometry.height - height) // 2), max(2, geometry.width - 2), height)


def draw_dashboard(
        stdscr: terminal.CursesWindowType,
        canvas: terminal.Canvas,
        geometry: DashboardGeometry,
        base_config: base.BaseConfig
) -> None:
    stdscr.erase()  # Instead of clear(), prevents flickering
    calendar_widget.draw(canvas, geometry.calendar, base_config)
    todo_widget.draw(canvas, geometry.tasks, base_config)
    stdscr.noutrefresh()


def run_edit_prompt(
        router: InteractionRouter,
        canvas: terminal.Canvas,
        width: int,
        base_config: base.BaseConfig
) -> StateDelta:
    state = router.state
    text = terminal.prompt_user_input(
        canvas,
        popup_rect(router.geometry(width)),
        state.title,
        getattr(state, 'text', ''),
        terminal.convert_color_number_to_curses_pair(base_config.PRIMARY_PAIR_NUMBER)
    )
    if text is None:
        return router.cancel()
    return router.confirm(text)


def handle_key_input(base_config: base.BaseConfig, key: int, log_messages: base.LogMessages) -> None:
    if key == ord(base_config.quit_key):
        raise base.StopException(log_messages)
    if key == ord(base_config.reload_key):  # Reload config & stores
        raise base.RestartException


def build_router(
        config_loader: base.ConfigLoader,
        dashboard_config: base.DashboardConfig,
        log_messages: base.LogMessages,
        redraw: RedrawFlag
) -> InteractionRouter:
    note_store, task_store = open_stores(
        config_loader.data_dir(), log_messages, dashboard_config.notes_file, dashboard_config.todos_file
    )
    metrics = dashboard_config.layout
    return InteractionRouter(
        CalendarEngine(metrics, note_store.load()),
        TaskListEngine(metrics, task_store.load()),
        note_store,
        task_store,
        request_redraw=redraw.request,
    )


def main_curses(stdscr: terminal.CursesWindowType, log_messages: base.LogMessages) -> None:
    # Config loader (Doesn't load anything yet)
    config_loader: base.ConfigLoader = base.ConfigLoader()
    config_loader.reload_env()  # needed to reload dashwidgets.env changes

    # Scan configs
    config_scanner: base.ConfigScanner = base.ConfigScanner(config_loader)
    config_scan_results: base.LogMessages | bool = config_scanner.scan_config()

    if config_scan_results is not True:
        raise base.ConfigScanFoundError(config_scan_results)  # type: ignore[arg-type]

    base_config: base.BaseConfig = config_loader.load_base_config(log_messages)
    dashboard_config: base.DashboardConfig = config_loader.load_dashboard_config(log_messages)

    redraw: RedrawFlag = RedrawFlag()
    router: InteractionRouter = build_router(config_loader, dashboard_config, log_messages, redraw)
    width: int = dashboard_config.layout.width

    terminal.init_curses_setup(stdscr, base_config)

    canvas: terminal.Canvas = terminal.Canvas(stdscr, dashboard_config.y, dashboard_config.x)
    drag: DragTracker = DragTracker()
    last_tick: float = time_module.monotonic()

    while True:
        try:
            terminal.validate_terminal_size(stdscr, canvas.y + router.height, canvas.x + width)

            key: int = stdscr.getch()  # Keypresses
            delta: StateDelta | None = None

            if key == terminal.CursesKeys.MOUSE:
                try:
                    _, mx, my, _, b_state = curses.getmouse()
                except terminal.CursesError:
                    # Ignore invalid mouse events (like scroll in some terminals)
                    b_state = 0
                if b_state:
                    delta = dispatch_mouse(router, canvas, drag, width, my, mx, b_state, stdscr.getmaxyx())
            elif key != -1:
                handle_key_input(base_config, key, log_messages)

            if not router.is_idle:
                draw_dashboard(stdscr, canvas, router.geometry(width), base_config)
                curses.doupdate()
                delta = run_edit_prompt(router, canvas, width, base_config)

            if not settle_delta(router, canvas, width, delta, stdscr.getmaxyx()):
                curses.flash()  # Store write failed; the warning is printed on exit

            now = time_module.monotonic()
            if now - last_tick >= TICK_INTERVAL:
                router.tick(datetime.date.today())
                last_tick = now

            if redraw.consume():
                draw_dashboard(stdscr, canvas, router.geometry(width), base_config)
                curses.doupdate()
        except (
                base.RestartException,
                base.StopException,
                base.TerminalTooSmall
        ):
            terminal.cleanup_curses_setup()
            raise  # re-raise so wrapper(main_curses) exits and outer loop stops
        except Exception as e:
            terminal.cleanup_curses_setup()
            try:
                terminal.validate_terminal_size(stdscr, canvas.y + router.height, canvas.x + width)
            except base.TerminalTooSmall:
                raise  # E.g. the terminal size just changed (split windows, ...)
            raise base.UnknownException(log_messages, str(e))


def main_entry_point() -> None:
    while True:
        # Logs (e.g. Warnings, failed store writes)
        log_messages: base.LogMessages = base.LogMessages()
        try:
            curses.wrapper(main_curses, log_messages)
        except base.RestartException:
            # wrapper() has already cleaned up curses at this point
            log_messages.print_log_messages(heading='Warnings before reload:\n')
            continue  # Restart main
        except base.ConfigScanFoundError as e:
            e.log_messages.print_log_messages(heading='Config errors & warnings (found by ConfigScanner):\n')
            break
        except base.ConfigFileNotFoundError as e:
            print(f'⚠️ Config File Not Found Error: {e}')
            print(f'\nPerhaps you haven\'t initialized the configuration. Please run: dashwidgets init')
            break
        except base.YAMLParseException as e:
            print(f'⚠️ {e}')
            break
        except base.StopException as e:
            e.log_messages.print_log_messages(heading='Warnings:\n')
            break
        except KeyboardInterrupt:
            log_messages.print_log_messages(heading='Warnings:\n')
            break
        except base.TerminalTooSmall as e:
            print(e)
        except terminal.CursesError:
            break  # Ignore; Doesn't happen on Py3.13, but does on Py3.12
        except base.UnknownException as e:
            if not e.log_messages.is_empty():
                e.log_messages.print_log_messages(heading='Warnings:\n')
                print('-> which results in:\n')
            print(
                f'⚠️ Unknown errors:\n'
                f'{e.error_message}\n'
            )
            raise
        break  # Exit if the end of the loop is reached (User exit)


if __name__ == '__main__':
    main_entry_point()
