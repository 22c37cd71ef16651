"""
CSV export of submissions

Every field is double-quoted. Score columns are recomputed from the
current judge scores, never read from a stored total.
"""
import csv
import io
from datetime import datetime
from typing import Iterable, List

from rover_shop.core.scoring import kb_bonus, items_points, submission_scores, submission_total
from rover_shop.models import CartItem, ScoringParams, Submission


SCORES_HEADERS = [
    "Team Name", "House", "Budget", "Remaining KB", "KB Bonus", "Rover Build (20)",
    "Coding (25)", "Items Collected", "Items Points", "Core Values (10)", "Total Score",
    "Parts", "Notes", "Timestamp",
]

SUBMISSIONS_HEADERS = [
    "Team Name", "Grade", "House", "Budget", "Spent", "Remaining", "Parts", "Timestamp",
]


def export_filename(prefix: str, timestamp_ms: int) -> str:
    return f"{prefix}-{timestamp_ms}.csv"


def format_parts(items: Iterable[CartItem]) -> str:
    """'Small Motor (2); Large Hub (1)'"""
    return "; ".join(f"{item.name} ({item.quantity})" for item in items)


def format_timestamp(timestamp: str) -> str:
    try:
        return datetime.fromisoformat(timestamp).strftime("%Y-%m-%d %H:%M:%S")
    except ValueError:
        return timestamp


def _to_csv(headers: List[str], rows: List[list]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(headers)
    writer.writerows(rows)
    return buffer.getvalue()


def export_scores_csv(submissions: Iterable[Submission], params: ScoringParams) -> str:
    """Judge scores CSV (one row per submission, in the order given)"""
    rows = []
    for submission in submissions:
        scores = submission_scores(submission)
        remaining = submission.budget
        rows.append([
            submission.team_name,
            submission.house,
            submission.budget,
            remaining,
            kb_bonus(remaining, params),
            scores.rover_build_score,
            scores.coding_score,
            scores.items_collected,
            items_points(scores.items_collected, params),
            scores.core_values_score,
            submission_total(submission, params),
            format_parts(submission.owned_items),
            scores.notes,
            format_timestamp(submission.timestamp),
        ])
    return _to_csv(SCORES_HEADERS, rows)


def export_submissions_csv(submissions: Iterable[Submission]) -> str:
    """Teacher CSV: budget and parts per submission"""
    rows = []
    for submission in submissions:
        rows.append([
            submission.team_name,
            submission.grade,
            submission.house,
            submission.budget,
            submission.spent,
            submission.budget - submission.spent,
            format_parts([*submission.owned_items, *submission.cart]),
            format_timestamp(submission.timestamp),
        ])
    return _to_csv(SUBMISSIONS_HEADERS, rows)
