"""FastAPI REST API for the expense tracker.

Provides endpoints for receipt analysis, confirming analysed receipts,
similarity search over the history, spending summaries and health checks.
"""

from __future__ import annotations

from collections import OrderedDict
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from src.expenses.config import ExpenseConfig
from src.expenses.expense import AnalysisResult, Expense, SimilarityResult
from src.expenses.tracker import ExpenseTracker, create_tracker

VERSION = "0.1.0"


# --- Request/Response Models ---


class ExpenseOut(BaseModel):
    """A recorded expense, without its embedding or image."""

    id: str
    merchant: str
    amount: float
    currency: str
    date: str
    category: str
    tax: Optional[float] = None
    items: Optional[list[str]] = None
    description: Optional[str] = None
    has_embedding: bool

    @classmethod
    def from_expense(cls, expense: Expense) -> ExpenseOut:
        return cls(
            id=expense.id,
            merchant=expense.merchant,
            amount=expense.amount,
            currency=expense.currency,
            date=expense.date,
            category=expense.category,
            tax=expense.tax,
            items=list(expense.items) if expense.items is not None else None,
            description=expense.description,
            has_embedding=expense.has_embedding,
        )


class MatchOut(BaseModel):
    """A similar historical expense and its score."""

    expense: ExpenseOut
    score: float

    @classmethod
    def from_result(cls, result: SimilarityResult) -> MatchOut:
        return cls(expense=ExpenseOut.from_expense(result.expense), score=result.score)


class ExtractedOut(BaseModel):
    merchant: Optional[str] = None
    amount: Optional[float] = None
    currency: Optional[str] = None
    date: Optional[str] = None
    tax: Optional[float] = None
    category: Optional[str] = None
    items: Optional[list[str]] = None


class AnalyzeRequest(BaseModel):
    """Request body for receipt analysis."""

    image: str = Field(..., min_length=1, description="Base64 encoded receipt image")
    mime_type: str = Field(default="image/jpeg", description="Image MIME type")


class AnalyzeResponse(BaseModel):
    analysis_id: str
    extracted: ExtractedOut
    similar: list[MatchOut]
    advice: list[str]
    sentiment: str


class ConfirmRequest(BaseModel):
    """Request body for recording an analysed receipt."""

    analysis_id: str = Field(..., min_length=1)
    attach_image: bool = Field(default=True, description="Store the receipt image too")


class SimilarRequest(BaseModel):
    text: str = Field(..., min_length=1, description="Expense description")
    top_k: Optional[int] = Field(default=None, ge=0, le=50, description="Number of matches")


class SimilarResponse(BaseModel):
    query: str
    matches: list[MatchOut]


class CategoryTotal(BaseModel):
    category: str
    total: float


class SummaryResponse(BaseModel):
    total_spent: float
    count: int
    top_category: Optional[str]
    categories: list[CategoryTotal]
    recent: list[ExpenseOut]


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    mode: str
    expense_count: int
    missing_embeddings: int
    version: str = VERSION


# --- Application ---

_tracker: Optional[ExpenseTracker] = None


def get_tracker() -> ExpenseTracker:
    """Get or create the global tracker instance."""
    global _tracker
    if _tracker is None:
        _tracker = create_tracker(ExpenseConfig()).expect("Could not start tracker")
    return _tracker


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    get_tracker()
    yield


def create_app(config: Optional[ExpenseConfig] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Optional ExpenseConfig. Defaults to environment-based config.
    """
    app = FastAPI(
        title="VisualFin",
        description="Receipt scanning with semantic comparison against past expenses",
        version=VERSION,
        lifespan=lifespan,
    )

    if config is not None:
        global _tracker
        _tracker = create_tracker(config).expect("Could not start tracker")

    # Analyses waiting for the user to confirm them, oldest first.
    pending: OrderedDict[str, tuple[AnalysisResult, str]] = OrderedDict()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        """Health check endpoint."""
        tracker = get_tracker()
        return HealthResponse(
            status="healthy",
            mode=tracker.config.mode.value,
            expense_count=tracker.store.count,
            missing_embeddings=tracker.missing_embeddings(),
        )

    @app.get("/expenses", response_model=list[ExpenseOut])
    async def list_expenses() -> list[ExpenseOut]:
        """All recorded expenses in insertion order."""
        return [ExpenseOut.from_expense(e) for e in get_tracker().history()]

    @app.post("/analyze", response_model=AnalyzeResponse)
    async def analyze(request: AnalyzeRequest) -> AnalyzeResponse:
        """Extract a receipt and compare it with similar past expenses."""
        result = get_tracker().analyze(request.image, request.mime_type)
        if result.is_err():
            raise HTTPException(status_code=502, detail=str(result.error))  # type: ignore[union-attr]

        analysis = result.unwrap()
        pending[analysis.analysis_id] = (analysis, request.image)
        while len(pending) > get_tracker().config.max_pending_analyses:
            pending.popitem(last=False)

        extracted = analysis.extracted
        return AnalyzeResponse(
            analysis_id=analysis.analysis_id,
            extracted=ExtractedOut(
                merchant=extracted.merchant,
                amount=extracted.amount,
                currency=extracted.currency,
                date=extracted.date,
                tax=extracted.tax,
                category=extracted.category,
                items=list(extracted.items) if extracted.items is not None else None,
            ),
            similar=[MatchOut.from_result(s) for s in analysis.similar],
            advice=analysis.advice,
            sentiment=analysis.sentiment.value,
        )

    @app.post("/expenses", response_model=ExpenseOut, status_code=201)
    async def confirm(request: ConfirmRequest) -> ExpenseOut:
        """Record a previously analysed receipt."""
        entry = pending.get(request.analysis_id)
        if entry is None:
            raise HTTPException(status_code=404, detail="Unknown or already confirmed analysis")

        analysis, image = entry
        result = get_tracker().confirm(
            analysis, receipt_image=image if request.attach_image else None
        )
        if result.is_err():
            raise HTTPException(status_code=500, detail=str(result.error))  # type: ignore[union-attr]
        pending.pop(request.analysis_id, None)
        return ExpenseOut.from_expense(result.unwrap())

    @app.post("/similar", response_model=SimilarResponse)
    async def similar(request: SimilarRequest) -> SimilarResponse:
        """Past expenses most similar to a description."""
        matches = get_tracker().find_similar(request.text, top_k=request.top_k)
        return SimilarResponse(
            query=request.text,
            matches=[MatchOut.from_result(m) for m in matches],
        )

    @app.get("/summary", response_model=SummaryResponse)
    async def summary() -> SummaryResponse:
        """Dashboard totals."""
        s = get_tracker().summary()
        return SummaryResponse(
            total_spent=s.total_spent,
            count=s.count,
            top_category=s.top_category,
            categories=[CategoryTotal(category=c, total=t) for c, t in s.category_totals],
            recent=[ExpenseOut.from_expense(e) for e in s.recent],
        )

    return app


# Default app instance for uvicorn
app = create_app()
