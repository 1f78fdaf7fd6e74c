import logging
import os
from pathlib import Path

try:
    import tomllib
except ModuleNotFoundError:
    import tomli as tomllib  # pyright: ignore[reportMissingImports]


SETTINGS_ENV = 'PEWHERE_SETTINGS'

SETTING_SKIP_DIRECTORIES = 'search.skip_directories'
SETTING_LOGGING_PATH = 'logging.path'
SETTING_LOGGING_LEVEL = 'logging.level'

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def default_settings_path() -> Path:
    """Location of the settings file when none is given explicitly.

    PEWHERE_SETTINGS wins; otherwise ``$XDG_CONFIG_HOME/pewhere/settings.toml``,
    falling back to ``~/.config``.
    """
    override = os.environ.get(SETTINGS_ENV)
    if override:
        return Path(override)

    config_home = os.environ.get('XDG_CONFIG_HOME')
    base = Path(config_home) if config_home else Path.home() / '.config'
    return base / 'pewhere' / 'settings.toml'


class Settings:
    """Read-only view of the pewhere TOML settings file.

    A missing file behaves like an empty one, so every get() returns its default.

    Example settings.toml:
        [search]
        skip_directories = ["/proc", "/sys"]

        [logging]
        path = "/var/log/pewhere.log"
        level = "INFO"
    """

    def __init__(self, path: str | os.PathLike | None = None):
        self._path = Path(path) if path is not None else default_settings_path()
        self._settings = {}

        if self._path.exists():
            with open(self._path, 'rb') as f:
                self._settings = tomllib.load(f)

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str, default=None):
        """Get a setting by dotted key path, e.g. 'search.skip_directories'.

        Returns the default when any component is missing or an intermediate
        value is not a table.
        """
        value = self._settings

        for k in key.split('.'):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def skip_directories(self) -> list[str]:
        value = self.get(SETTING_SKIP_DIRECTORIES, [])
        if isinstance(value, str):
            value = [value]
        return [os.path.expanduser(os.path.expandvars(str(v))) for v in value]

    def configure_logging(self, level: str | None = None, log_file: str | None = None) -> None:
        """Configure the root logger, letting explicit arguments override settings.

        The level defaults to WARNING. Without a log file, records go to stderr.
        """
        if level is None:
            level = self.get(SETTING_LOGGING_LEVEL, 'WARNING')
        if log_file is None:
            log_file = self.get(SETTING_LOGGING_PATH)

        numeric_level = getattr(logging, str(level).upper(), None)
        if not isinstance(numeric_level, int):
            raise ValueError(f"Invalid log level: {level}")

        for handler in logging.root.handlers[:]:
            logging.root.removeHandler(handler)

        logging.basicConfig(
            filename=str(log_file) if log_file else None,
            level=numeric_level,
            format=LOG_FORMAT
        )
