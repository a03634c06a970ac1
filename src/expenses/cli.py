"""CLI interface for the expense tracker.

Provides command-line access to tracker operations:
- demo: Scan a sample receipt against the sample history
- scan: Analyse a receipt image and optionally record it
- similar: Find past expenses similar to a description
- history: List recorded expenses
- summary: Spending totals per category
- serve: Start the FastAPI server
"""

from __future__ import annotations

import argparse
import base64
import json
import logging
import mimetypes
import sys
from pathlib import Path

from src.expenses.config import ExpenseConfig, RunMode
from src.expenses.expense import AnalysisResult, SimilarityResult
from src.expenses.samples import SAMPLE_EXPENSES
from src.expenses.store import ExpenseStore
from src.expenses.tracker import ExpenseTracker, create_tracker

DEMO_RECEIPT = base64.b64encode(b"demo receipt: Starbucks latte croissant").decode()


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be 0 or more, got {number}")
    return number


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="VisualFin - receipt scanning with semantic expense comparison"
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    subparsers.add_parser("demo", help="Run a complete demo on sample data")

    scan_parser = subparsers.add_parser("scan", help="Analyse a receipt image")
    scan_parser.add_argument("image", help="Path to the receipt image")
    scan_parser.add_argument("--mime-type", default=None, help="Override the image MIME type")
    scan_parser.add_argument(
        "--yes", action="store_true", help="Record the expense without asking"
    )

    similar_parser = subparsers.add_parser("similar", help="Find similar past expenses")
    similar_parser.add_argument("text", help="Description to compare against")
    similar_parser.add_argument(
        "--top-k", type=_non_negative_int, default=None, help="Number of matches"
    )

    subparsers.add_parser("history", help="List recorded expenses")
    subparsers.add_parser("summary", help="Show spending per category")

    serve_parser = subparsers.add_parser("serve", help="Start API server")
    serve_parser.add_argument("--host", default=None, help="Host")
    serve_parser.add_argument("--port", type=int, default=None, help="Port")

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    config = ExpenseConfig()
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if args.command == "demo":
        run_demo()
    elif args.command == "serve":
        run_serve(args.host or config.api_host, args.port or config.api_port)
    else:
        tracker = _open_tracker(config)
        if args.command == "scan":
            run_scan(tracker, args.image, args.mime_type, args.yes)
        elif args.command == "similar":
            run_similar(tracker, args.text, args.top_k)
        elif args.command == "history":
            run_history(tracker)
        elif args.command == "summary":
            run_summary(tracker)


def _open_tracker(config: ExpenseConfig) -> ExpenseTracker:
    result = create_tracker(config)
    if result.is_err():
        print(f"ERROR: {result.error}")  # type: ignore[union-attr]
        sys.exit(1)
    return result.unwrap()


def _print_matches(matches: list[SimilarityResult]) -> None:
    if not matches:
        print("  No similar expenses found.")
        return
    for i, match in enumerate(matches, 1):
        e = match.expense
        print(
            f"  [{i}] {e.date} {e.merchant} ({e.category}) "
            f"{e.amount:.2f} {e.currency} - score {match.score:.3f}"
        )


def _print_analysis(analysis: AnalysisResult) -> None:
    extracted = analysis.extracted
    amount = f"{extracted.amount:.2f}" if extracted.amount is not None else "?"
    print(f"Merchant: {extracted.merchant or 'Unknown'}")
    print(f"Amount:   {amount} {extracted.currency or ''}".rstrip())
    print(f"Date:     {extracted.date or '?'}")
    print(f"Category: {extracted.category or 'Uncategorized'}")
    if extracted.items:
        print(f"Items:    {', '.join(extracted.items)}")
    print()
    print("Similar expenses:")
    _print_matches(analysis.similar)
    print()
    print(f"Advice ({analysis.sentiment.value}):")
    for line in analysis.advice:
        print(f"  - {line}")


def run_demo() -> None:
    """Run a complete demo against the in-memory sample history."""
    print("=" * 60)
    print("VisualFin - Demo Mode")
    print("=" * 60)
    print()

    tracker = ExpenseTracker(ExpenseConfig(mode=RunMode.MOCK), store=ExpenseStore())

    print(f"[1/3] Loading {len(SAMPLE_EXPENSES)} sample expenses...")
    seeded = tracker.seed(SAMPLE_EXPENSES)
    if seeded.is_err():
        print(f"ERROR: {seeded.error}")  # type: ignore[union-attr]
        sys.exit(1)
    print(f"      Stored {seeded.unwrap()} expenses")
    print()

    print("[2/3] Scanning sample receipt...")
    result = tracker.analyze(DEMO_RECEIPT)
    if result.is_err():
        print(f"ERROR: {result.error}")  # type: ignore[union-attr]
        sys.exit(1)
    analysis = result.unwrap()
    print()

    print("[3/3] Results:")
    print("-" * 60)
    _print_analysis(analysis)
    print("=" * 60)

    json_output = {
        "merchant": analysis.extracted.merchant,
        "amount": analysis.extracted.amount,
        "sentiment": analysis.sentiment.value,
        "similar": [
            {"id": s.expense.id, "merchant": s.expense.merchant, "score": s.score}
            for s in analysis.similar
        ],
    }
    print("JSON output:")
    print(json.dumps(json_output, indent=2))


def run_scan(
    tracker: ExpenseTracker, image: str, mime_type: str | None, assume_yes: bool
) -> None:
    """Analyse a receipt image and record it on confirmation."""
    path = Path(image)
    if not path.exists():
        print(f"ERROR: File not found: {image}")
        sys.exit(1)

    image_b64 = base64.b64encode(path.read_bytes()).decode()
    mime = mime_type or mimetypes.guess_type(path.name)[0] or "image/jpeg"

    result = tracker.analyze(image_b64, mime)
    if result.is_err():
        print(f"ERROR: {result.error}. Please try again.")  # type: ignore[union-attr]
        sys.exit(1)

    analysis = result.unwrap()
    _print_analysis(analysis)
    print()

    if not assume_yes:
        answer = input("Save this expense? [y/N] ").strip().lower()
        if answer not in ("y", "yes"):
            print("Discarded.")
            return

    saved = tracker.confirm(analysis, receipt_image=image_b64)
    if saved.is_err():
        print(f"ERROR: {saved.error}")  # type: ignore[union-attr]
        sys.exit(1)
    print(f"Saved expense {saved.unwrap().id}")


def run_similar(tracker: ExpenseTracker, text: str, top_k: int | None) -> None:
    """Print past expenses similar to a description as JSON."""
    matches = tracker.find_similar(text, top_k=top_k)
    print(json.dumps({
        "query": text,
        "matches": [
            {
                "id": m.expense.id,
                "merchant": m.expense.merchant,
                "category": m.expense.category,
                "amount": m.expense.amount,
                "date": m.expense.date,
                "score": m.score,
            }
            for m in matches
        ],
    }, indent=2))


def run_history(tracker: ExpenseTracker) -> None:
    """List every recorded expense, newest first."""
    expenses = sorted(tracker.history(), key=lambda e: e.date, reverse=True)
    if not expenses:
        print("No expenses recorded.")
        return
    for e in expenses:
        marker = "" if e.has_embedding else "  (no embedding)"
        print(f"{e.date}  {e.merchant:<20} {e.category:<16} {e.amount:>9.2f} {e.currency}{marker}")


def run_summary(tracker: ExpenseTracker) -> None:
    """Print spending totals."""
    summary = tracker.summary()
    print(f"Total spent: {summary.total_spent:.2f} across {summary.count} expenses")
    print(f"Top category: {summary.top_category or 'N/A'}")
    for name, total in summary.category_totals:
        print(f"  {name:<20} {total:>9.2f}")


def run_serve(host: str, port: int) -> None:
    """Start the FastAPI server."""
    import uvicorn
    uvicorn.run("src.api.app:app", host=host, port=port)


if __name__ == "__main__":
    main()
