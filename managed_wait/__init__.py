from .browser import Browser
from .implicitly_wait import MINIMAL_IMPLICIT_TIMEOUT, ImplicitlyWait, ReentrancyCounter
from .settings import browser_kwargs, load_wait_config, read_config
from .wait import (DEFAULT_EXPLICIT_TIMEOUT, DEFAULT_IMPLICIT_TIMEOUT, POLL_FREQUENCY,
                   STALE_REFERENCE_IGNORED_EXCEPTIONS, ManagedWait, WaitConfig)

__version__ = '1.0.0'
