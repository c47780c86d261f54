import threading
from typing import Callable, Iterable, List

from apps.common import get_logger

from .items import ClientCartItem
from .reconcile import CartOp, CartState, apply_optimistic

logger = get_logger(__name__).bind(component="storefront", layer="store")

Listener = Callable[[CartState], None]


class CartStateStore:
    """Holds the mirrored cart and notifies subscribers of every change.

    One instance is created by the consuming application and passed to the
    mirror and splitter; there is no module-level cart state.
    """

    def __init__(self, items: Iterable[ClientCartItem] = ()):
        self._state: CartState = tuple(items)
        self._listeners: List[Listener] = []
        self._lock = threading.RLock()

    @property
    def state(self) -> CartState:
        return self._state

    def replace(self, items: Iterable[ClientCartItem]) -> CartState:
        with self._lock:
            self._state = tuple(items)
            state = self._state
        self._notify(state)
        return state

    def dispatch(self, op: CartOp) -> CartState:
        with self._lock:
            self._state = apply_optimistic(self._state, op)
            state = self._state
        self._notify(state)
        return state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; the returned callable removes it again."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, state: CartState) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(state)
            except Exception:
                logger.exception("Cart listener failed", listener=getattr(listener, "__name__", repr(listener)))
