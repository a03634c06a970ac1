"""Receipt extraction and advisory providers with a mock for offline use.

Supports:
- OpenAI multimodal model (production)
- Mock advisor (demo/testing - deterministic receipts and rule-based advice)
"""

from __future__ import annotations

import hashlib
import json
from abc import ABC, abstractmethod
from dataclasses import asdict
from typing import Optional

from pydantic import BaseModel, Field

from src.expenses.config import ExpenseConfig, RunMode
from src.expenses.expense import (
    SUGGESTED_CATEGORIES,
    Advice,
    Expense,
    ExtractedReceipt,
    Sentiment,
)
from src.expenses.result import Err, Ok, Result

DEFAULT_ADVICE = ["Track your spending carefully."]
FALLBACK_ADVICE = ["Could not generate insights at this time."]

EXTRACTION_PROMPT = (
    "Analyze this receipt image. Extract the merchant name, total amount, currency, "
    "date (YYYY-MM-DD format), tax amount, and a list of purchased items. Also, "
    "categorize this expense into one of: "
    + ", ".join(f"'{c}'" for c in SUGGESTED_CATEGORIES)
    + "."
)


class ReceiptSchema(BaseModel):
    """Structured output requested from the model for a receipt."""

    merchant: str
    amount: float
    currency: Optional[str] = None
    date: str = Field(description="Purchase date, YYYY-MM-DD")
    tax: Optional[float] = None
    category: str
    items: Optional[list[str]] = None


class AdviceSchema(BaseModel):
    """Structured output requested from the model for advice."""

    advice: Optional[list[str]] = None
    sentiment: Optional[Sentiment] = None


class ReceiptAdvisor(ABC):
    """Reads receipts and comments on new spending."""

    @abstractmethod
    def extract(
        self, image_b64: str, mime_type: str = "image/jpeg"
    ) -> Result[ExtractedReceipt, str]:
        """Extract structured fields from a base64 receipt image."""
        ...

    @abstractmethod
    def advise(
        self, current: ExtractedReceipt, similar: list[Expense]
    ) -> Result[Advice, str]:
        """Compare a new expense against similar historical ones."""
        ...


def history_context(similar: list[Expense]) -> list[dict[str, object]]:
    """The slice of each similar expense that is shown to the advisor."""
    return [
        {"merchant": e.merchant, "amount": e.amount, "date": e.date, "category": e.category}
        for e in similar
    ]


class MockReceiptAdvisor(ReceiptAdvisor):
    """Deterministic advisor for testing and demos.

    Extraction picks one of a few canned receipts from the image hash.
    Advice compares the new amount with the mean of similar expenses.
    """

    RECEIPTS = [
        ExtractedReceipt(
            merchant="Starbucks",
            amount=6.25,
            currency="USD",
            date="2023-11-12",
            tax=0.50,
            category="Food & Dining",
            items=("Latte", "Croissant"),
        ),
        ExtractedReceipt(
            merchant="Uber",
            amount=31.80,
            currency="USD",
            date="2023-11-14",
            tax=2.10,
            category="Transportation",
            items=("Ride to Airport",),
        ),
        ExtractedReceipt(
            merchant="Whole Foods",
            amount=54.12,
            currency="USD",
            date="2023-11-15",
            tax=3.02,
            category="Food & Dining",
            items=("Bananas", "Oat Milk", "Sourdough"),
        ),
    ]

    # Relative deviation from the historical mean that triggers a verdict.
    THRESHOLD = 0.2

    def extract(
        self, image_b64: str, mime_type: str = "image/jpeg"
    ) -> Result[ExtractedReceipt, str]:
        if not image_b64.strip():
            return Err("Receipt image is empty")
        index = int(hashlib.md5(image_b64.encode()).hexdigest()[:4], 16) % len(self.RECEIPTS)
        return Ok(self.RECEIPTS[index])

    def advise(
        self, current: ExtractedReceipt, similar: list[Expense]
    ) -> Result[Advice, str]:
        if not similar or current.amount is None:
            return Ok(
                Advice(
                    advice=[
                        "No comparable purchases yet; this one sets your baseline.",
                        *DEFAULT_ADVICE,
                    ],
                    sentiment=Sentiment.NEUTRAL,
                )
            )

        average = sum(e.amount for e in similar) / len(similar)
        merchant = current.merchant or "this merchant"
        advice = [
            f"You paid {current.amount:.2f} against an average of {average:.2f} "
            f"across {len(similar)} similar purchases."
        ]

        if average > 0 and current.amount > average * (1 + self.THRESHOLD):
            sentiment = Sentiment.WARNING
            advice.append(f"This is higher than usual for {merchant}.")
            advice.append("Check whether prices or quantities have changed.")
        elif average > 0 and current.amount < average * (1 - self.THRESHOLD):
            sentiment = Sentiment.POSITIVE
            advice.append(f"This is cheaper than your usual spend at {merchant}.")
            advice.append("Good deal; keep an eye out for similar offers.")
        else:
            sentiment = Sentiment.NEUTRAL
            advice.append("This is in line with your usual spending.")
            repeat = sum(1 for e in similar if e.merchant == current.merchant)
            if repeat >= 2:
                advice.append(f"You visit {merchant} regularly; consider a budget for it.")
            else:
                advice.append(DEFAULT_ADVICE[0])

        return Ok(Advice(advice=advice, sentiment=sentiment))


class OpenAIReceiptAdvisor(ReceiptAdvisor):
    """OpenAI multimodal provider for production use."""

    def __init__(self, config: ExpenseConfig) -> None:
        self._config = config

    def _llm(self):  # type: ignore[no-untyped-def]
        from langchain_openai import ChatOpenAI

        return ChatOpenAI(
            model=self._config.llm_model,
            temperature=self._config.llm_temperature,
            api_key=self._config.openai_api_key,
        )

    def extract(
        self, image_b64: str, mime_type: str = "image/jpeg"
    ) -> Result[ExtractedReceipt, str]:
        try:
            from langchain_core.messages import HumanMessage

            message = HumanMessage(
                content=[
                    {
                        "type": "image_url",
                        "image_url": {"url": f"data:{mime_type};base64,{image_b64}"},
                    },
                    {"type": "text", "text": EXTRACTION_PROMPT},
                ]
            )
            parsed = self._llm().with_structured_output(ReceiptSchema).invoke([message])
            return Ok(ExtractedReceipt(**parsed.model_dump()))
        except ImportError:
            return Err("langchain-openai not installed")
        except Exception as e:
            return Err(f"Receipt extraction failed: {e}")

    def advise(
        self, current: ExtractedReceipt, similar: list[Expense]
    ) -> Result[Advice, str]:
        prompt = (
            "Act as a proactive, intelligent financial analyst.\n\n"
            f"New Expense Context:\n{json.dumps(asdict(current))}\n\n"
            "Similar Historical Expenses (found via semantic search):\n"
            f"{json.dumps(history_context(similar))}\n\n"
            "Task:\n"
            "1. Compare the new expense to the history (price trends, frequency).\n"
            "2. Identify if this is higher than usual, a recurring subscription, or a good deal.\n"
            "3. Provide 3 short, actionable bullet points of advice or insight.\n"
            "4. Determine a sentiment/status (positive, neutral, negative, warning)."
        )
        try:
            parsed = self._llm().with_structured_output(AdviceSchema).invoke(prompt)
            return Ok(
                Advice(
                    advice=parsed.advice or list(DEFAULT_ADVICE),
                    sentiment=parsed.sentiment or Sentiment.NEUTRAL,
                )
            )
        except ImportError:
            return Err("langchain-openai not installed")
        except Exception as e:
            return Err(f"Advice generation failed: {e}")


def create_receipt_advisor(config: ExpenseConfig) -> ReceiptAdvisor:
    """Factory function to create the appropriate advisor."""
    if config.mode in (RunMode.MOCK, RunMode.HYBRID):
        return MockReceiptAdvisor()
    return OpenAIReceiptAdvisor(config)
