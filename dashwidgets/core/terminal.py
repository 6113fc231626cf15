from __future__ import annotations
from enum import IntEnum
import curses
import _curses
import sys
import typing

from dashwidgets.core.base import BaseConfig, TerminalTooSmall
from dashwidgets.core.geometry import Rect

# xterm "any event" mouse tracking, needed for hover reports
ENABLE_MOTION_TRACKING: str = '\033[?1003h'
DISABLE_MOTION_TRACKING: str = '\033[?1003l'

INPUT_TIMEOUT_MS: int = 100  # getch timeout of the main loop


class Canvas:
    """The dashboard's placement on the screen; drawing uses dashboard-local coordinates"""

    def __init__(self, win: CursesWindowType, y: int, x: int) -> None:
        self.win: typing.Any = win
        self.y: int = y
        self.x: int = x

    def to_local(self, screen_y: int, screen_x: int) -> tuple[int, int]:
        return screen_y - self.y, screen_x - self.x

    def move_by(self, dy: int, dx: int, max_y: int, max_x: int) -> bool:
        new_y = min(max(self.y + dy, 0), max(max_y, 0))
        new_x = min(max(self.x + dx, 0), max(max_x, 0))
        moved = (new_y, new_x) != (self.y, self.x)
        self.y, self.x = new_y, new_x
        return moved


def safe_addstr(canvas: Canvas, y: int, x: int, text: str, color: int = 0) -> None:
    max_y, max_x = canvas.win.getmaxyx()
    screen_y, screen_x = canvas.y + y, canvas.x + x
    if screen_y < 0 or screen_y >= max_y or screen_x < 0 or screen_x >= max_x:
        return
    safe_text = text[:max_x - screen_x - 1]
    try:
        canvas.win.addstr(screen_y, screen_x, safe_text, color)
    except curses.error:
        pass


def draw_box(canvas: Canvas, rect: Rect, color: int = 0) -> None:
    if rect.width < 2 or rect.height < 2:
        return
    inner = rect.width - 2
    safe_addstr(canvas, rect.y, rect.x, '┌' + '─' * inner + '┐', color)
    for row in range(rect.y + 1, rect.bottom - 1):
        safe_addstr(canvas, row, rect.x, '│', color)
        safe_addstr(canvas, row, rect.right - 1, '│', color)
    safe_addstr(canvas, rect.bottom - 1, rect.x, '└' + '─' * inner + '┘', color)


def clear_rect(canvas: Canvas, rect: Rect) -> None:
    for row in range(rect.y, rect.bottom):
        safe_addstr(canvas, row, rect.x, ' ' * rect.width)


def convert_color_number_to_curses_pair(color_number: int) -> int:
    return curses.color_pair(color_number)


def init_colors(base_config: BaseConfig) -> None:
    curses.start_color()
    if base_config.use_standard_terminal_background:
        curses.use_default_colors()

    if curses.can_change_color():
        if not base_config.use_standard_terminal_background:
            curses.init_color(
                base_config.BACKGROUND_NUMBER,
                *base_config.background_color.rgb_to_0_1000()
            )
        for color_number, (_, color) in base_config.base_colors.items():
            curses.init_color(color_number, *color.rgb_to_0_1000())
        pairs: dict[int, int] = {
            pair_number: color_number for color_number, (pair_number, _) in base_config.base_colors.items()
        }
    else:
        pairs = {
            base_config.BACKGROUND_FOREGROUND_PAIR_NUMBER: curses.COLOR_WHITE,
            base_config.PRIMARY_PAIR_NUMBER: curses.COLOR_YELLOW,
            base_config.SECONDARY_PAIR_NUMBER: curses.COLOR_CYAN,
            base_config.DANGER_PAIR_NUMBER: curses.COLOR_RED,
        }

    for pair_number, color_number in pairs.items():
        curses.init_pair(pair_number, color_number, base_config.BACKGROUND_NUMBER)


def init_curses_setup(stdscr: CursesWindowType, base_config: BaseConfig) -> None:
    curses.mousemask(curses.ALL_MOUSE_EVENTS | curses.REPORT_MOUSE_POSITION)
    curses.curs_set(0)
    curses.mouseinterval(0)
    stdscr.move(0, 0)
    curses.set_escdelay(25)
    init_colors(base_config)
    stdscr.bkgd(' ', curses.color_pair(base_config.BACKGROUND_FOREGROUND_PAIR_NUMBER))
    stdscr.keypad(True)
    stdscr.clear()
    stdscr.refresh()
    stdscr.timeout(INPUT_TIMEOUT_MS)
    sys.stdout.write(ENABLE_MOTION_TRACKING)
    sys.stdout.flush()


def cleanup_curses_setup() -> None:
    sys.stdout.write(DISABLE_MOTION_TRACKING)
    sys.stdout.flush()
    try:
        curses.endwin()
    except CursesError:
        pass  # Ignore; Doesn't happen on Py3.13, but does on Py3.12


def validate_terminal_size(stdscr: typing.Any, min_height: int, min_width: int) -> None:
    height, width = stdscr.getmaxyx()

    if height < min_height or width < min_width:
        raise TerminalTooSmall(height, width, min_height, min_width)


def prompt_user_input(canvas: Canvas, popup: Rect, title: str, initial: str = '', color: int = 0) -> str | None:
    """Modal one-line editor inside `popup`; Enter returns the text, Escape returns None"""
    win = canvas.win

    curses.curs_set(1)
    win.timeout(-1)  # block while the prompt is open

    left_margin: int = 2
    usable_width: int = max(0, popup.width - 2 * left_margin)
    input_y: int = canvas.y + popup.y + 2
    input_x: int = canvas.x + popup.x + left_margin
    max_input_len: int = max(0, usable_width - 1)

    input_str: str = initial
    cursor_pos: int = len(input_str)

    def redraw_input() -> None:
        # Scroll so the cursor stays inside the field
        offset = max(0, cursor_pos - max_input_len)
        win.move(input_y, input_x)
        win.addstr(' ' * usable_width)
        win.move(input_y, input_x)
        win.addstr(input_str[offset:offset + max_input_len])
        win.move(input_y, input_x + cursor_pos - offset)
        win.refresh()

    clear_rect(canvas, popup)
    draw_box(canvas, popup, color)
    safe_addstr(canvas, popup.y + 1, popup.x + left_margin, title, CursesBold)
    safe_addstr(canvas, popup.y + popup.height - 2, popup.x + left_margin, 'Enter: save  Esc: cancel')

    try:
        redraw_input()
    except curses.error:
        curses.curs_set(0)
        win.timeout(INPUT_TIMEOUT_MS)
        return None

    result: str | None = None
    while True:
        ch = win.get_wch()

        if ch in ('\n', '\r', curses.KEY_ENTER):  # ENTER
            result = input_str
            break
        if ch == '\x1b' or ch == CursesKeys.ESCAPE:
            result = None
            break
        elif ch in ('\b', '\x7f', curses.KEY_BACKSPACE):  # BACKSPACE
            if cursor_pos > 0:
                input_str = input_str[:cursor_pos - 1] + input_str[cursor_pos:]
                cursor_pos -= 1
        elif ch == curses.KEY_LEFT:
            cursor_pos = max(0, cursor_pos - 1)
        elif ch == curses.KEY_RIGHT:
            cursor_pos = min(len(input_str), cursor_pos + 1)
        elif ch == curses.KEY_DC:  # DELETE
            input_str = input_str[:cursor_pos] + input_str[cursor_pos + 1:]
        elif isinstance(ch, int):  # Ignore other special keys (and mouse events)
            continue
        elif isinstance(ch, str) and len(ch) == 1 and ch.isprintable():
            input_str = input_str[:cursor_pos] + ch + input_str[cursor_pos:]
            cursor_pos += 1
        try:
            redraw_input()
        except curses.error:
            result = None
            break

    curses.curs_set(0)
    win.timeout(INPUT_TIMEOUT_MS)
    return result


# Constants

CursesWindowType = _curses.window  # Type of stdscr

CursesBold = curses.A_BOLD
CursesReverse = curses.A_REVERSE
CursesDim = curses.A_DIM
CursesError = _curses.error


class CursesKeys(IntEnum):
    ENTER = curses.KEY_ENTER
    BACKSPACE = curses.KEY_BACKSPACE
    ESCAPE = 27
    MOUSE = curses.KEY_MOUSE
    BUTTON1_PRESSED = curses.BUTTON1_PRESSED
    BUTTON1_RELEASED = curses.BUTTON1_RELEASED
    BUTTON1_CLICKED = curses.BUTTON1_CLICKED
    REPORT_MOUSE_POSITION = curses.REPORT_MOUSE_POSITION
