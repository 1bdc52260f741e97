import logging
import os
from typing import Optional, Tuple, Type
from sys import platform

from selenium import webdriver  # type: ignore
from selenium.webdriver.chrome.service import Service  # type: ignore
from webdriver_manager.chrome import ChromeDriverManager  # type: ignore

from .implicitly_wait import ReentrancyCounter
from .wait import (DEFAULT_EXPLICIT_TIMEOUT, DEFAULT_IMPLICIT_TIMEOUT, POLL_FREQUENCY,
                   STALE_REFERENCE_IGNORED_EXCEPTIONS, ManagedWait, WaitConfig)

log = logging.getLogger(__name__)

LOCAL_DRIVERS = {
    'linux': 'chrome_linux',
    'linux2': 'chrome_linux',
    'win32': 'chrome_windows.exe',
    'darwin': 'chrome_mac',
}


def local_driver_path(drivers_dir: Optional[str] = None) -> Optional[str]:
    """Devuelve la ruta del ChromeDriver local en 'drivers/' para la plataforma actual, si existe."""

    drivers_dir = drivers_dir or os.path.join(os.getcwd(), 'drivers')
    if not os.path.isdir(drivers_dir):
        return None

    name = LOCAL_DRIVERS.get(platform)
    if name is None:
        return None

    candidate = os.path.join(drivers_dir, name)
    if not os.path.exists(candidate):
        return None

    try:
        os.chmod(candidate, 0o755)
    except OSError as exc:
        log.warning(f'No se pudieron ajustar los permisos de {candidate}: {exc}')
    return candidate


class Browser:
    def __init__(self, window: bool = True, binary_location: Optional[str] = None, default_lang: bool = False,
                 implicit_timeout: Optional[float] = DEFAULT_IMPLICIT_TIMEOUT, use_local_driver: bool = False):

        # Configurar opciones de Chrome
        options = webdriver.ChromeOptions()

        if not default_lang:
            options.add_experimental_option('prefs', {'intl.accept_languages': 'en,en_US'})

        # Headless si window=False
        if not window:
            options.add_argument('--headless=new')
            options.add_argument('--disable-gpu')
            options.add_argument('--window-size=1920,1080')

        if binary_location:
            options.binary_location = binary_location

        # Por defecto usar webdriver-manager; el binario de 'drivers/' solo con use_local_driver=True.
        driver_path = local_driver_path() if use_local_driver else None
        if driver_path is None:
            driver_path = ChromeDriverManager().install()

        self.driver = webdriver.Chrome(service=Service(driver_path), options=options)
        self.implicit_timeout = implicit_timeout
        # Compartido por todas las esperas de este navegador
        self.counter = ReentrancyCounter()

        if implicit_timeout is not None:
            self.driver.implicitly_wait(implicit_timeout)

    def wait(self, timeout: float = DEFAULT_EXPLICIT_TIMEOUT,
             ignored_exceptions: Optional[Tuple[Type[BaseException], ...]] = None) -> ManagedWait:
        """Crea una espera gestionada que restaura la espera implícita de este navegador."""

        if ignored_exceptions is None:
            ignored_exceptions = STALE_REFERENCE_IGNORED_EXCEPTIONS

        config = WaitConfig(
            timeout=timeout,
            poll_frequency=POLL_FREQUENCY,
            ignored_exceptions=ignored_exceptions,
            implicit_timeout=self.implicit_timeout,
        )
        return ManagedWait(self.driver, config, self.counter)

    def quit(self) -> None:
        self.driver.quit()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.quit()
