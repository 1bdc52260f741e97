import logging
import threading

from contextlib import contextmanager
from typing import Iterator, Optional, Protocol

log = logging.getLogger(__name__)

MINIMAL_IMPLICIT_TIMEOUT = 0.5


class SupportsImplicitWait(Protocol):
    def implicitly_wait(self, time_to_wait: float) -> None: ...


class ReentrancyCounter:
    """Contador atómico de suspensiones activas de la espera implícita."""

    def __init__(self, value: int = 0):
        self._value = value
        self._lock = threading.Lock()

    @property
    def value(self) -> int:
        with self._lock:
            return self._value

    def increment(self) -> int:
        with self._lock:
            self._value += 1
            return self._value

    def decrement(self) -> int:
        with self._lock:
            if self._value == 0:
                raise RuntimeError('La espera implícita se restauró más veces de las que se suspendió.')
            self._value -= 1
            return self._value

    def __repr__(self) -> str:
        return f'ReentrancyCounter({self._value})'


class ImplicitlyWait:
    def __init__(self, driver: SupportsImplicitWait, timeout: Optional[float],
                 counter: Optional[ReentrancyCounter] = None):
        self.driver = driver
        self.timeout = timeout
        self.counter = counter if counter is not None else ReentrancyCounter()

    def enable(self) -> None:
        """Restaura la espera implícita configurada al cerrar la suspensión más externa."""

        if self.timeout is None:
            return

        if self.counter.decrement() == 0:
            log.debug(f'Restaurando la espera implícita a {self.timeout}s')
            self.driver.implicitly_wait(self.timeout)

    def disable(self) -> None:
        """Reduce la espera implícita al mínimo al abrir la suspensión más externa.

        Las suspensiones anidadas solo incrementan el contador, así que una espera
        interna nunca reactiva la espera larga mientras la externa sigue sondeando.
        """

        if self.timeout is None:
            return

        if self.counter.increment() == 1:
            log.debug(f'Suspendiendo la espera implícita ({MINIMAL_IMPLICIT_TIMEOUT}s)')
            try:
                self.driver.implicitly_wait(MINIMAL_IMPLICIT_TIMEOUT)
            except Exception:
                # La suspensión no llegó a abrirse
                self.counter.decrement()
                raise

    @contextmanager
    def ignore(self) -> Iterator[None]:
        """Deshabilita temporalmente la espera implícita dentro del bloque gestionado."""

        self.disable()
        try:
            yield
        finally:
            self.enable()
