"""
Caché en memoria de resúmenes generados, con expiración absoluta (TTL).

La clave es el contenido exacto de la nota con un prefijo de espacio de nombres.
Sin límite de tamaño: las entradas salen por expiración, al leerlas o en el
barrido periódico que dispara `set`.
"""
import threading
from time import monotonic
from typing import Callable, Dict, Optional, Tuple

NAMESPACE = "summary:"


class SummaryCache:
    def __init__(
        self,
        ttl_seconds: float = 3600,
        clock: Callable[[], float] = monotonic,
        sweep_interval: float = 60,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.sweep_interval = sweep_interval
        self._clock = clock
        self._lock = threading.Lock()
        # key -> (expira_en, resumen)
        self._entries: Dict[str, Tuple[float, str]] = {}
        self._next_sweep = clock() + sweep_interval

    @staticmethod
    def key_for(content: str) -> str:
        return f"{NAMESPACE}{content}"

    def get(self, content: str) -> Optional[str]:
        """Devuelve el resumen cacheado o None (miss o expirado; lo expirado se descarta)."""
        key = self.key_for(content)
        with self._lock:
            item = self._entries.get(key)
            if item is None:
                return None
            expires_at, summary = item
            if self._clock() > expires_at:
                del self._entries[key]
                return None
            return summary

    def set(self, content: str, summary: str) -> None:
        with self._lock:
            now = self._clock()
            if now >= self._next_sweep:
                self._purge_locked(now)
            self._entries[self.key_for(content)] = (now + self.ttl_seconds, summary)

    def _purge_locked(self, now: float) -> int:
        dead = [k for k, (exp, _) in self._entries.items() if now > exp]
        for k in dead:
            del self._entries[k]
        self._next_sweep = now + self.sweep_interval
        return len(dead)

    def purge_expired(self) -> int:
        """Barrido de entradas expiradas; devuelve cuántas se eliminaron."""
        with self._lock:
            return self._purge_locked(self._clock())

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
