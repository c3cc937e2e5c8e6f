"""
Control de admisión en memoria (ventana fija por cliente).

Uso típico:
- Envío de notas por IP: limiter.try_consume(client_ip) con 50 puntos cada 60 segundos.

El estado vive en el proceso; un reinicio limpia todos los presupuestos.
Las ventanas vencidas se descartan en un barrido periódico dentro de `try_consume`.
"""
import math
import threading
from time import monotonic
from typing import Callable, Dict, Tuple


class AdmissionController:
    """Presupuesto de puntos por cliente dentro de una ventana fija.

    key: identificador del cliente (IP o similar)
    limit: máximo de puntos consumibles dentro de la ventana
    window_seconds: duración de la ventana en segundos
    """

    def __init__(self, limit: int = 50, window_seconds: float = 60, clock: Callable[[], float] = monotonic) -> None:
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._lock = threading.Lock()
        # key -> (inicio de ventana, puntos consumidos)
        self._buckets: Dict[str, Tuple[float, int]] = {}
        self._next_sweep = clock() + window_seconds

    def _current(self, key: str, now: float) -> Tuple[float, int]:
        start, used = self._buckets.get(key, (now, 0))
        if now - start > self.window_seconds:
            return now, 0
        return start, used

    def _sweep_locked(self, now: float) -> None:
        stale = [k for k, (start, _) in self._buckets.items() if now - start > self.window_seconds]
        for k in stale:
            del self._buckets[k]
        self._next_sweep = now + self.window_seconds

    def try_consume(self, key: str, cost: int = 1) -> bool:
        """Devuelve True si se admite la petición y registra su costo."""
        with self._lock:
            now = self._clock()
            if now >= self._next_sweep:
                self._sweep_locked(now)
            start, used = self._current(key, now)
            if used + cost > self.limit:
                self._buckets[key] = (start, used)
                return False
            self._buckets[key] = (start, used + cost)
            return True

    def remaining(self, key: str) -> int:
        """Puntos disponibles para `key` en su ventana actual."""
        with self._lock:
            _, used = self._current(key, self._clock())
            return max(0, self.limit - used)

    def retry_after(self, key: str) -> int:
        """Segundos (redondeados hacia arriba) hasta que reinicie la ventana de `key`."""
        with self._lock:
            now = self._clock()
            start, _ = self._current(key, now)
            return max(1, math.ceil(self.window_seconds - (now - start)))

    def reset(self) -> None:
        """Limpia todos los presupuestos (útil en tests o reinicios)."""
        with self._lock:
            self._buckets.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._buckets)
