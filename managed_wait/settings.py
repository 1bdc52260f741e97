from configparser import ConfigParser
from typing import Any, Dict

from .wait import DEFAULT_IMPLICIT_TIMEOUT, WaitConfig


def read_config(path: str = 'config.ini') -> ConfigParser:
    parser = ConfigParser()
    parser.read(path, encoding='utf8')
    return parser


def load_wait_config(path: str = 'config.ini', section: str = 'Wait') -> WaitConfig:
    return WaitConfig.from_parser(read_config(path), section)


def browser_kwargs(parser: ConfigParser, section: str = 'Browser') -> Dict[str, Any]:
    """Traduce la sección [Browser] a los argumentos aceptados por `Browser`."""

    kwargs: Dict[str, Any] = {
        'window': parser.getboolean(section, 'Window', fallback=True),
        'default_lang': parser.getboolean(section, 'Default Lang', fallback=False),
        'use_local_driver': parser.getboolean(section, 'Use Local Driver', fallback=False),
        'implicit_timeout': parser.getfloat(section, 'Implicit Timeout', fallback=DEFAULT_IMPLICIT_TIMEOUT),
    }

    binary_location = parser.get(section, 'Binary Location', fallback=None)
    if binary_location:
        kwargs['binary_location'] = binary_location

    return kwargs
