import logging

from configparser import ConfigParser
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple, Type, TypeVar

from selenium.common.exceptions import NoSuchElementException, StaleElementReferenceException  # type: ignore
from selenium.webdriver.support.wait import WebDriverWait  # type: ignore

from .implicitly_wait import ImplicitlyWait, ReentrancyCounter, SupportsImplicitWait

log = logging.getLogger(__name__)

T = TypeVar('T')

DEFAULT_IMPLICIT_TIMEOUT = 30
DEFAULT_EXPLICIT_TIMEOUT = 15
POLL_FREQUENCY = 0.5

# AttributeError cubre los accesos sobre None dentro de la condición; puede ocultar
# errores reales del llamador.
STALE_REFERENCE_IGNORED_EXCEPTIONS: Tuple[Type[BaseException], ...] = (
    StaleElementReferenceException,
    NoSuchElementException,
    AttributeError,
)


class ExactWebDriverWait(WebDriverWait):
    """WebDriverWait que ignora solo las excepciones indicadas, sin añadir NoSuchElementException."""

    def __init__(self, driver: Any, timeout: float, poll_frequency: float,
                 ignored_exceptions: Tuple[Type[BaseException], ...]):
        super().__init__(driver, timeout, poll_frequency=poll_frequency)
        self._ignored_exceptions = tuple(ignored_exceptions)


@dataclass(frozen=True)
class WaitConfig:
    timeout: float = DEFAULT_EXPLICIT_TIMEOUT
    poll_frequency: float = POLL_FREQUENCY
    ignored_exceptions: Tuple[Type[BaseException], ...] = STALE_REFERENCE_IGNORED_EXCEPTIONS
    implicit_timeout: Optional[float] = DEFAULT_IMPLICIT_TIMEOUT

    def __post_init__(self):
        if self.timeout < 0:
            raise ValueError(f'El tiempo de espera explícito no puede ser negativo: {self.timeout}')
        if self.poll_frequency <= 0:
            raise ValueError(f'El intervalo de sondeo debe ser mayor que 0: {self.poll_frequency}')
        if self.implicit_timeout is not None and self.implicit_timeout < 0:
            raise ValueError(f'La espera implícita no puede ser negativa: {self.implicit_timeout}')
        object.__setattr__(self, 'ignored_exceptions', tuple(self.ignored_exceptions))

    @classmethod
    def from_parser(cls, parser: ConfigParser, section: str = 'Wait') -> 'WaitConfig':
        """Construye la configuración a partir de la sección indicada de un archivo INI.

        Un valor vacío o "none" en "Implicit Timeout" desactiva la gestión de la espera implícita.
        """

        timeout = parser.getfloat(section, 'Timeout', fallback=DEFAULT_EXPLICIT_TIMEOUT)
        poll_frequency = parser.getfloat(section, 'Poll Frequency', fallback=POLL_FREQUENCY)

        raw_implicit = parser.get(section, 'Implicit Timeout', fallback=str(DEFAULT_IMPLICIT_TIMEOUT))
        implicit_timeout: Optional[float]
        if raw_implicit.strip().lower() in ('', 'none'):
            implicit_timeout = None
        else:
            try:
                implicit_timeout = float(raw_implicit)
            except ValueError as exc:
                raise ValueError(f'Valor no válido para "Implicit Timeout": "{raw_implicit}"') from exc

        return cls(timeout=timeout, poll_frequency=poll_frequency, implicit_timeout=implicit_timeout)


class ManagedWait:
    """Espera explícita que suspende la espera implícita del driver mientras sondea.

    Sin esta gestión, cada búsqueda fallida dentro de la condición bloquearía hasta
    agotar la espera implícita y el intervalo de sondeo dejaría de tener sentido.
    """

    def __init__(self, driver: SupportsImplicitWait, config: WaitConfig,
                 counter: Optional[ReentrancyCounter] = None):
        self.driver = driver
        self.config = config
        self.implicitly_wait = ImplicitlyWait(driver, config.implicit_timeout, counter)

    @property
    def counter(self) -> ReentrancyCounter:
        return self.implicitly_wait.counter

    def _wait_for(self, target: Any) -> WebDriverWait:
        return ExactWebDriverWait(
            target,
            self.config.timeout,
            poll_frequency=self.config.poll_frequency,
            ignored_exceptions=self.config.ignored_exceptions,
        )

    def _managed(self, condition: Callable[[Any], T]) -> Callable[[Any], T]:
        def wrapper(value: Any) -> T:
            with self.implicitly_wait.ignore():
                return condition(value)

        return wrapper

    def until(self, condition: Callable[[Any], T], message: str = '') -> T:
        """Espera hasta que la condición aplicada al driver devuelva un valor verdadero.

        Sirve tanto para transformaciones (se devuelve el valor obtenido) como para
        predicados. Lanza TimeoutException si se agota el tiempo explícito.
        """

        return self.until_on(self.driver, condition, message)

    def until_on(self, target: Any, condition: Callable[[Any], T], message: str = '') -> T:
        """Igual que `until`, pero la condición recibe `target` en lugar del driver."""

        log.debug(f'Esperando hasta {self.config.timeout}s (sondeo cada {self.config.poll_frequency}s)')
        return self._wait_for(target).until(self._managed(condition), message)

    @classmethod
    def ignore_stale_reference(cls, driver: SupportsImplicitWait, timeout: float = DEFAULT_EXPLICIT_TIMEOUT,
                               counter: Optional[ReentrancyCounter] = None) -> 'ManagedWait':
        """Espera que ignora referencias obsoletas y elementos aún no encontrados."""

        return cls.only_explicit_timeout(driver, timeout, STALE_REFERENCE_IGNORED_EXCEPTIONS, counter)

    @classmethod
    def only_explicit_timeout(cls, driver: SupportsImplicitWait, timeout: float,
                              ignored_exceptions: Tuple[Type[BaseException], ...],
                              counter: Optional[ReentrancyCounter] = None) -> 'ManagedWait':
        config = WaitConfig(
            timeout=timeout,
            poll_frequency=POLL_FREQUENCY,
            ignored_exceptions=tuple(ignored_exceptions),
            implicit_timeout=DEFAULT_IMPLICIT_TIMEOUT,
        )
        return cls(driver, config, counter)
