"""
Receipt Extraction

DESIGN DECISION: Receipt scanning sits behind the ReceiptExtractor
interface. The only implementation today is SimulatedReceiptExtractor,
which does NOT read the image: after a short delay it proposes a random
amount and category. A real OCR service can replace it without touching
the record store or the analytics.

IMPORTANT BOUNDARIES:
1. Extraction only pre-fills the transaction form
2. Nothing is stored until the user submits the form
3. The delay is cancellable (plain asyncio cancellation)
"""

import asyncio
import base64
import random
from abc import ABC, abstractmethod
from datetime import date
from typing import Callable, Optional

from pydantic import BaseModel, Field

from finwise.models.records import ExpenseCategory


class ReceiptExtractionError(Exception):
    """Failed to extract data from a receipt image."""
    pass


class ReceiptExtraction(BaseModel):
    """
    Form values proposed from a receipt image.

    This is PROPOSED data. The user reviews it in the form before saving.
    """

    amount: float = Field(gt=0)
    category: str
    description: str
    receipt_image: str = Field(
        description="The uploaded image as a data URL"
    )
    simulated: bool = Field(
        default=False,
        description="True when the values were not read from the image"
    )


def to_data_url(image_bytes: bytes, mime_type: str) -> str:
    """Encode image bytes as a data URL, the stored receipt reference."""
    encoded = base64.b64encode(image_bytes).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


class ReceiptExtractor(ABC):
    """Interface for anything that proposes transaction fields from a receipt."""

    @abstractmethod
    async def extract(
        self,
        image_bytes: bytes,
        mime_type: str = "image/png",
    ) -> ReceiptExtraction:
        """
        Propose form values for a receipt image.

        Raises:
            ReceiptExtractionError: If no values can be proposed
        """
        pass


class SimulatedReceiptExtractor(ReceiptExtractor):
    """
    Stand-in for OCR: random amount in [10, 110), random expense category.
    """

    def __init__(
        self,
        delay_seconds: float = 1.5,
        rng: Optional[random.Random] = None,
        today: Callable[[], date] = date.today,
    ):
        self._delay_seconds = delay_seconds
        self._rng = rng or random.Random()
        self._today = today
        self._categories = [c.value for c in ExpenseCategory]

    async def extract(
        self,
        image_bytes: bytes,
        mime_type: str = "image/png",
    ) -> ReceiptExtraction:
        if not image_bytes:
            raise ReceiptExtractionError("Receipt image is empty")

        receipt_image = to_data_url(image_bytes, mime_type)

        if self._delay_seconds > 0:
            await asyncio.sleep(self._delay_seconds)

        # Rounding can reach 110.00; keep the upper bound exclusive
        amount = min(round(self._rng.random() * 100 + 10, 2), 109.99)
        category = self._rng.choice(self._categories)

        return ReceiptExtraction(
            amount=amount,
            category=category,
            description=f"Receipt from {self._today().strftime('%m/%d/%Y')}",
            receipt_image=receipt_image,
            simulated=True,
        )
