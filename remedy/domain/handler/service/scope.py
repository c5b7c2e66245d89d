"""Call-site-local handler overrides.

    deal_with = create_deal_with(global_store)

    try:
        client.get(url).raise_for_status()
    except httpx.HTTPError as e:
        deal_with({"404": "Dataset not found"})(e)

Local solutions shadow the global ones; unmatched keys still resolve against
the global store unless ``ignore_global`` is set.
"""

from collections.abc import Callable, Mapping
from typing import Any, NewType, NoReturn

from remedy.domain.handler.model.descriptor import Handler, Notifier
from remedy.domain.handler.model.store import HandlerStore
from remedy.domain.handler.port.transport import TransportInspector
from remedy.domain.handler.service.resolution import ResolutionEngine

FailureHandler = Callable[[Any], NoReturn]

DealWith = NewType("DealWith", Callable[..., FailureHandler])
"""``deal_with(solutions, ignore_global=False) -> (failure) -> NoReturn``."""


def create_deal_with(
    global_store: HandlerStore,
    notifier: Notifier | None = None,
    inspector: TransportInspector | None = None,
) -> DealWith:
    """Build a ``deal_with`` bound to a global store.

    Args:
        global_store: Store that local solutions fall back to.
        notifier: Notifier for local stores. Defaults to the global store's.
        inspector: Transport inspector for local engines.
    """

    def deal_with(
        solutions: Mapping[str, Handler],
        ignore_global: bool = False,
    ) -> FailureHandler:
        parent = None if ignore_global else global_store
        local = HandlerStore(parent, solutions, notifier or global_store.notifier)
        engine = ResolutionEngine(local, inspector)

        def handle(failure: Any) -> NoReturn:
            engine.dispatch(failure, direct=True)

        return handle

    return DealWith(deal_with)
