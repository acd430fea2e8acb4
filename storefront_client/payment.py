"""Payment collector capability.

The online settlement path hands control to an external collector (the
gateway's checkout widget) and waits for it to report a receipt. The
orchestrator only depends on the PaymentCollector interface, so a real widget
bridge and a fake used in tests are interchangeable.

Widgets that report completion through callbacks (the gateway's own
``handler`` / ``modal.ondismiss`` contract) can be adapted with
CallbackCollector:

    collector = CallbackCollector(lambda options: Razorpay(options))
    receipt = await collector.open(options)
"""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Optional

import structlog

from .errors import PaymentDismissedError
from .models import PaymentReceipt

logger = structlog.get_logger()


@dataclass(frozen=True)
class CollectorOptions:
    """Everything the collector needs to take a payment for one gateway order."""

    key: str
    amount: int
    currency: str
    order_id: str
    name: str
    description: str
    image: str
    theme_color: Optional[str] = None

    def to_widget_options(self) -> dict[str, Any]:
        """Options in the shape the gateway widget is constructed with."""
        options: dict[str, Any] = {
            "key": self.key,
            "amount": self.amount,
            "currency": self.currency,
            "order_id": self.order_id,
            "name": self.name,
            "description": self.description,
            "image": self.image,
        }
        if self.theme_color:
            options["theme"] = {"color": self.theme_color}
        return options


class PaymentCollector(ABC):
    """Collects a payment and resolves with the gateway receipt.

    open() may take arbitrarily long. Implementations raise
    PaymentDismissedError when the shopper closes the collector without
    paying; any other failure should propagate as an exception.
    """

    @abstractmethod
    async def open(self, options: CollectorOptions) -> PaymentReceipt: ...


Widget = Any
WidgetFactory = Callable[[dict[str, Any]], Widget]


class CallbackCollector(PaymentCollector):
    """Adapts a callback-style widget into an awaitable collector.

    widget_factory receives the widget options (with ``handler`` and
    ``modal.ondismiss`` callbacks filled in) and returns an object with an
    ``open()`` method. The callbacks may fire from any thread.
    """

    def __init__(self, widget_factory: WidgetFactory):
        self._widget_factory = widget_factory

    async def open(self, options: CollectorOptions) -> PaymentReceipt:
        loop = asyncio.get_running_loop()
        future: asyncio.Future[PaymentReceipt] = loop.create_future()

        def settle(result: Optional[PaymentReceipt], error: Optional[Exception]) -> None:
            if future.done():
                return
            if error is not None:
                future.set_exception(error)
            else:
                future.set_result(result)

        def on_complete(response: dict[str, Any]) -> None:
            try:
                receipt = PaymentReceipt.from_gateway(response)
            except (KeyError, TypeError) as e:
                loop.call_soon_threadsafe(settle, None, e)
                return
            loop.call_soon_threadsafe(settle, receipt, None)

        def on_dismiss(*_args: Any) -> None:
            loop.call_soon_threadsafe(settle, None, PaymentDismissedError())

        widget_options = options.to_widget_options()
        widget_options["handler"] = on_complete
        widget_options["modal"] = {"ondismiss": on_dismiss}

        widget = self._widget_factory(widget_options)
        widget.open()
        logger.info("payment_collector_opened", order_id=options.order_id)
        return await future
