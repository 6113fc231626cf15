from __future__ import annotations  # allows forward references in type hints
from enum import Enum
from pathlib import Path
import yaml
import yaml.parser
from dotenv import load_dotenv
import os
import typing

from dashwidgets.core.geometry import LayoutMetrics


class RestartException(Exception):
    """Raised to signal that the curses UI should restart"""


class StopException(Exception):
    """Raised to signal that the curses UI should stop"""
    def __init__(self, log_messages: LogMessages) -> None:
        self.log_messages: LogMessages = log_messages


class YAMLParseException(Exception):
    """Raised to signal that there was an error parsing a YAML file"""


class TerminalTooSmall(Exception):
    def __init__(self, height: int, width: int, min_height: int, min_width: int) -> None:
        """Raised to signal that the terminal is too small"""
        self.height = height
        self.width = width
        self.min_height = min_height
        self.min_width = min_width
        super().__init__(height, width)

    def __repr__(self) -> str:
        return self.__str__()

    def __str__(self) -> str:
        return \
            f'\n' \
            f'⚠️ Terminal too small. Minimum size: {self.min_width}x{self.min_height}\n' \
            f'(Width x Height)\n' \
            f'Current size: {self.width}x{self.height}\n' \
            f'Either decrease your font size, increase the size of the terminal, or move the dashboard.\n'


class ConfigScanFoundError(Exception):
    def __init__(self, log_messages: LogMessages) -> None:
        self.log_messages: LogMessages = log_messages
        super().__init__(log_messages)


class ConfigFileNotFoundError(Exception):
    def __init__(self, error_details: str) -> None:
        self.error_details: str = error_details
        super().__init__(error_details)


class UnknownException(Exception):
    def __init__(self, log_messages: LogMessages, error_message: str) -> None:
        self.log_messages: LogMessages = log_messages
        self.error_message = error_message
        super().__init__(log_messages, error_message)


class LogLevels(Enum):
    UNKNOWN = (0, '? Unknown')
    INFO = (1, 'ℹ️ Info')
    DEBUG = (2, '🐞 Debug')
    WARNING = (3, '⚠️ Warnings')
    ERROR = (4, '⚠️ Errors')

    @property
    def key(self) -> int:
        return self.value[0]

    @property
    def label(self) -> str:
        return self.value[1]

    @classmethod
    def from_key(cls, key: int) -> LogLevels:
        """Return the LogLevels member that matches the key"""
        for level in cls:
            if level.key == key:
                return level
        return LogLevels.UNKNOWN


class LogMessage:
    def __init__(self, message: str, level: int) -> None:
        self.message: str = message
        self.level: int = level

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return self.message

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LogMessage):
            return NotImplemented
        return self.message == other.message and self.level == other.level

    def is_error(self) -> bool:
        return self.level == LogLevels.ERROR.key


class LogMessages:
    def __init__(self, log_messages: list[LogMessage] | None = None) -> None:
        if log_messages is None:
            self.log_messages: list[LogMessage] = []
        else:
            self.log_messages = log_messages

    def __add__(self, other: LogMessages) -> LogMessages:
        return LogMessages(self.log_messages + other.log_messages)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LogMessages):
            return NotImplemented
        return self.log_messages == other.log_messages

    def __len__(self) -> int:
        return len(self.log_messages)

    def add_log_message(self, message: LogMessage) -> None:
        self.log_messages.append(message)

    def warning(self, message: str) -> None:
        self.add_log_message(LogMessage(message, LogLevels.WARNING.key))

    def error(self, message: str) -> None:
        self.add_log_message(LogMessage(message, LogLevels.ERROR.key))

    def debug(self, message: str) -> None:
        self.add_log_message(LogMessage(message, LogLevels.DEBUG.key))

    def by_level(self) -> dict[int, list[LogMessage]]:
        log_messages_by_level: dict[int, list[LogMessage]] = {}
        for message in self.log_messages:
            log_messages_by_level.setdefault(message.level, []).append(message)
        return log_messages_by_level

    def print_log_messages(self, heading: str, include_debug: bool = False) -> None:
        log_messages_by_level = self.by_level()
        if not include_debug:
            log_messages_by_level.pop(LogLevels.DEBUG.key, None)
        if not log_messages_by_level:
            return

        print(heading, end='')
        for level in sorted(log_messages_by_level.keys()):
            print(f'\n{LogLevels.from_key(level).label}:')
            for message in log_messages_by_level[level]:
                print(message)

    def contains_error(self) -> bool:
        return any(message.is_error() for message in self.log_messages)

    def is_empty(self) -> bool:
        return not self.log_messages


class RGBColor:
    def __init__(self, r: int, g: int, b: int) -> None:
        self.r = r
        self.g = g
        self.b = b

    def rgb_to_0_1000(self) -> tuple[int, int, int]:
        return (
            round(self.r * 1000 / 255),
            round(self.g * 1000 / 255),
            round(self.b * 1000 / 255),
        )

    @staticmethod
    def add_rgb_color_from_dict(color: dict[str, typing.Any]) -> RGBColor:
        # Make sure every value is an int (else raise an error)
        return RGBColor(r=int(color['r']), g=int(color['g']), b=int(color['b']))


class BaseStandardFallBackConfig:
    def __init__(self) -> None:
        self.background_color: RGBColor = RGBColor(r=31, g=31, b=31)
        self.foreground_color: RGBColor = RGBColor(r=242, g=242, b=242)
        self.primary_color: RGBColor = RGBColor(r=255, g=148, b=0)  # today, selection
        self.secondary_color: RGBColor = RGBColor(r=179, g=179, b=179)  # muted text, notes
        self.danger_color: RGBColor = RGBColor(r=250, g=77, b=77)  # delete control

        self.use_standard_terminal_background: bool = True

        self.quit_key: str = 'q'
        self.reload_key: str = 'r'


class BaseConfig:
    COLOR_FIELDS: tuple[str, ...] = (
        'background_color', 'foreground_color', 'primary_color', 'secondary_color', 'danger_color'
    )
    KEY_FIELDS: tuple[str, ...] = ('quit_key', 'reload_key')

    def __init__(
            self,
            log_messages: LogMessages,
            use_standard_terminal_background: bool | None = None,
            **kwargs: typing.Any
    ) -> None:
        fallback: BaseStandardFallBackConfig = BaseStandardFallBackConfig()

        self.background_color: RGBColor = fallback.background_color
        self.foreground_color: RGBColor = fallback.foreground_color
        self.primary_color: RGBColor = fallback.primary_color
        self.secondary_color: RGBColor = fallback.secondary_color
        self.danger_color: RGBColor = fallback.danger_color
        self.use_standard_terminal_background: bool = fallback.use_standard_terminal_background
        self.quit_key: str = fallback.quit_key
        self.reload_key: str = fallback.reload_key

        for field_name in self.COLOR_FIELDS:
            color = kwargs.pop(field_name, None)
            if color is None:
                log_messages.warning(
                    f'Configuration for {field_name} is missing (base.yaml, falling back to standard config)'
                )
                continue
            try:
                setattr(self, field_name, RGBColor.add_rgb_color_from_dict(color))
            except KeyError as e:
                log_messages.error(f'Configuration for {field_name} is missing for {e}')
            except (TypeError, ValueError) as e:
                log_messages.error(f'Configuration for {field_name} is invalid for {e}')

        for field_name in self.KEY_FIELDS:
            key = kwargs.pop(field_name, None)
            if key is None:
                log_messages.warning(
                    f'Configuration for {field_name} is missing (base.yaml, falling back to standard config)'
                )
                continue
            if not isinstance(key, str) or len(key) != 1:
                log_messages.error(f'Configuration for {field_name} value wrong length (not 1)')
                continue
            if not (key.isalpha() or key.isdigit()):
                log_messages.error(f'Configuration for {field_name} value not alphabetic or numeric')
                continue
            setattr(self, field_name, key)

        if self.quit_key == self.reload_key:
            log_messages.error('Configuration for quit_key and reload_key must differ')

        if use_standard_terminal_background is not None:
            if not isinstance(use_standard_terminal_background, bool):
                log_messages.error(
                    'Configuration for use_standard_terminal_background is invalid (not True / False)'
                )
            else:
                self.use_standard_terminal_background = use_standard_terminal_background
        else:
            log_messages.warning(
                'Configuration for use_standard_terminal_background is missing (base.yaml,'
                ' falling back to standard config)'
            )

        # color number -> (pair number, color)
        self.base_colors: dict[int, tuple[int, RGBColor]] = {
            2: (1, self.foreground_color),
            15: (2, self.primary_color),
            13: (3, self.secondary_color),
            9: (4, self.danger_color),
        }

        if self.use_standard_terminal_background:
            self.BACKGROUND_NUMBER: int = -1
        else:
            self.BACKGROUND_NUMBER = 1

        self.BACKGROUND_FOREGROUND_PAIR_NUMBER: int = 1
        self.PRIMARY_PAIR_NUMBER: int = 2
        self.SECONDARY_PAIR_NUMBER: int = 3
        self.DANGER_PAIR_NUMBER: int = 4

        for key in kwargs:
            log_messages.warning(f'Configuration for key "{key}" is not expected (base.yaml)')


class DashboardConfig:
    """Window placement, layout overrides and store file names (dashboard.yaml)"""

    def __init__(
            self,
            log_messages: LogMessages,
            x: int | None = None,
            y: int | None = None,
            layout: dict[str, typing.Any] | None = None,
            notes_file: str | None = None,
            todos_file: str | None = None,
            **kwargs: typing.Any
    ) -> None:
        self.x: int = 0
        self.y: int = 0
        for field_name, value in (('x', x), ('y', y)):
            if value is None:
                log_messages.warning(f'Configuration for {field_name} is missing (dashboard.yaml, using 0)')
            elif not isinstance(value, int) or isinstance(value, bool) or value < 0:
                log_messages.error(f'Configuration for {field_name} is missing / incorrect (dashboard.yaml)')
            else:
                setattr(self, field_name, value)

        self.notes_file: str | None = None
        self.todos_file: str | None = None
        for field_name, value in (('notes_file', notes_file), ('todos_file', todos_file)):
            if value is None:
                continue
            if not isinstance(value, str) or not value.strip():
                log_messages.error(f'Configuration for {field_name} is incorrect (dashboard.yaml)')
            else:
                setattr(self, field_name, value)

        self.layout: LayoutMetrics = self.load_layout(log_messages, layout)

        for key in kwargs:
            log_messages.warning(f'Configuration for key "{key}" is not expected (dashboard.yaml)')

    @staticmethod
    def load_layout(log_messages: LogMessages, layout: dict[str, typing.Any] | None) -> LayoutMetrics:
        if layout is None:
            log_messages.warning('Configuration for layout is missing (dashboard.yaml, using desktop defaults)')
            return LayoutMetrics()
        if not isinstance(layout, dict):
            log_messages.error('Configuration for layout is not a mapping (dashboard.yaml)')
            return LayoutMetrics()

        known_fields = LayoutMetrics.field_names()
        overrides: dict[str, int] = {}
        for key, value in layout.items():
            if key not in known_fields:
                log_messages.warning(f'Configuration for layout key "{key}" is not expected (dashboard.yaml)')
            elif not isinstance(value, int) or isinstance(value, bool) or value < 0:
                log_messages.error(f'Configuration for layout.{key} is not a non-negative integer (dashboard.yaml)')
            else:
                overrides[key] = value

        metrics = LayoutMetrics(**overrides)
        if metrics.cell_width(metrics.width) <= 0:
            log_messages.error('Configuration for layout.width leaves no room for the calendar grid')
        return metrics


class ConfigLoader:
    ENV_FILE_NAME: str = 'dashwidgets.env'
    DATA_DIR_ENV: str = 'DASHWIDGETS_DATA_DIR'

    def __init__(self, config_dir: Path | None = None) -> None:
        self.CONFIG_DIR = config_dir if config_dir is not None else default_config_dir()
        load_dotenv(self.CONFIG_DIR / self.ENV_FILE_NAME)

    def reload_env(self) -> None:
        load_dotenv(self.CONFIG_DIR / self.ENV_FILE_NAME, override=True)

    @staticmethod
    def get_env(name: str, default: typing.Any | None = None) -> str | None:
        return os.getenv(name, default)

    def data_dir(self) -> Path:
        """Directory holding the notes / tasks files"""
        override: str | None = self.get_env(self.DATA_DIR_ENV)
        if override:
            return Path(override).expanduser()
        return default_data_dir()

    @staticmethod
    def load_yaml(path: Path) -> dict[str, typing.Any]:
        with open(path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f) or {}

    def _load_config_file(self, file_name: str) -> dict[str, typing.Any]:
        path = self.CONFIG_DIR / file_name
        if not path.exists():
            raise ConfigFileNotFoundError(f'Config "{path}" not found')
        try:
            pure_yaml = self.load_yaml(path)
        except yaml.YAMLError:
            raise YAMLParseException(f'Config "{path}" not valid YAML')
        if not isinstance(pure_yaml, dict):
            raise YAMLParseException(f'Config "{path}" is not a mapping')
        return pure_yaml

    def load_base_config(self, log_messages: LogMessages) -> BaseConfig:
        return BaseConfig(log_messages=log_messages, **self._load_config_file('base.yaml'))

    def load_dashboard_config(self, log_messages: LogMessages) -> DashboardConfig:
        return DashboardConfig(log_messages=log_messages, **self._load_config_file('dashboard.yaml'))


class ConfigScanner:
    def __init__(self, config_loader: ConfigLoader) -> None:
        self.config_loader = config_loader

    def scan_config(self) -> LogMessages | typing.Literal[True]:
        """Scan config, either returns log messages or 'True' representing that no errors were found"""
        final_log: LogMessages = LogMessages()

        loaders: list[typing.Callable[[LogMessages], typing.Any]] = [
            self.config_loader.load_base_config,
            self.config_loader.load_dashboard_config,
        ]
        for loader in loaders:
            current_log = LogMessages()
            try:
                loader(current_log)
                if current_log.contains_error():
                    final_log += current_log
            except YAMLParseException as e:
                final_log.error(str(e))

        if final_log.contains_error():
            return final_log
        return True


def default_config_dir() -> Path:
    return Path.home() / '.config' / 'dashwidgets'


def default_data_dir() -> Path:
    """Per-user config directory, or the working directory if $HOME is unset"""
    home: str | None = os.getenv('HOME')
    if not home:
        return Path('.')
    return Path(home) / '.config' / 'dashwidgets'
