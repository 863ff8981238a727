"""Trip itinerary PDF rendering with PyMuPDF."""

import textwrap
from collections import defaultdict
from collections.abc import Sequence
from datetime import date

import fitz  # PyMuPDF

from backend.app.db.models.trip import TripActivity, TripPlan

PAGE_WIDTH, PAGE_HEIGHT = fitz.paper_size("a4")
MARGIN = 40
BOTTOM_LIMIT = PAGE_HEIGHT - 60

PRIMARY = (180 / 255, 83 / 255, 9 / 255)
DATES_CARD = (254 / 255, 243 / 255, 199 / 255)
BUDGET_CARD = (220 / 255, 252 / 255, 231 / 255)
DAY_BAND = (243 / 255, 244 / 255, 246 / 255)
DARK = (40 / 255, 40 / 255, 40 / 255)
MUTED = (100 / 255, 100 / 255, 100 / 255)
WHITE = (1, 1, 1)

REGULAR = "helv"
BOLD = "hebo"


def _format_date(value: date, with_year: bool = True) -> str:
    return value.strftime("%d %b %Y" if with_year else "%d %b").lstrip("0")


def _centered(page: fitz.Page, y: float, text: str, fontsize: float, fontname: str, color) -> None:
    width = fitz.get_text_length(text, fontname=fontname, fontsize=fontsize)
    page.insert_text(
        ((PAGE_WIDTH - width) / 2, y), text, fontsize=fontsize, fontname=fontname, color=color
    )


def _activity_title(activity: TripActivity) -> tuple[str, str]:
    if activity.site is not None:
        return activity.site.name, "Heritage site"
    if activity.restaurant is not None:
        return activity.restaurant.name, "Restaurant"
    return (activity.notes or "Free time").splitlines()[0][:60], "Activity"


class _Cursor:
    """Tracks the current page and vertical position, adding pages on overflow."""

    def __init__(self, doc: fitz.Document) -> None:
        self.doc = doc
        self.page = doc.new_page(width=PAGE_WIDTH, height=PAGE_HEIGHT)
        self.y = MARGIN

    def ensure(self, height: float) -> None:
        if self.y + height > BOTTOM_LIMIT:
            self.page = self.doc.new_page(width=PAGE_WIDTH, height=PAGE_HEIGHT)
            self.y = MARGIN

    def text(self, x: float, text: str, fontsize: float = 10, fontname: str = REGULAR, color=DARK) -> None:
        self.page.insert_text((x, self.y), text, fontsize=fontsize, fontname=fontname, color=color)


def render_trip_pdf(trip: TripPlan, activities: Sequence[TripActivity]) -> bytes:
    """Render a trip and its activities as an A4 PDF.

    Args:
        trip: Trip to render
        activities: Trip activities with ``site``/``restaurant`` loaded

    Returns:
        PDF document bytes
    """
    ordered = sorted(activities, key=lambda a: (a.date, a.order_index))
    total_cost = sum(a.estimated_cost or 0 for a in ordered)

    by_date: dict[date, list[TripActivity]] = defaultdict(list)
    for activity in ordered:
        by_date[activity.date].append(activity)

    doc = fitz.open()
    try:
        cursor = _Cursor(doc)
        page = cursor.page

        # Header band
        page.draw_rect(fitz.Rect(0, 0, PAGE_WIDTH, 110), color=None, fill=PRIMARY)
        _centered(page, 50, "KOLKATA EXPLORER", 26, BOLD, WHITE)
        _centered(page, 80, "Your Heritage Trip Itinerary", 12, REGULAR, WHITE)

        _centered(page, 150, trip.name, 20, BOLD, DARK)

        # Summary cards
        card_width = (PAGE_WIDTH - 2 * MARGIN - 20) / 2
        card_top = 175
        card_height = 60
        page.draw_rect(
            fitz.Rect(MARGIN, card_top, MARGIN + card_width, card_top + card_height),
            color=None,
            fill=DATES_CARD,
        )
        page.draw_rect(
            fitz.Rect(
                MARGIN + card_width + 20,
                card_top,
                MARGIN + 2 * card_width + 20,
                card_top + card_height,
            ),
            color=None,
            fill=BUDGET_CARD,
        )

        page.insert_text(
            (MARGIN + 14, card_top + 22), "TRAVEL DATES", fontsize=9, fontname=REGULAR, color=MUTED
        )
        page.insert_text(
            (MARGIN + 14, card_top + 42),
            f"{_format_date(trip.start_date, with_year=False)} - {_format_date(trip.end_date)}",
            fontsize=11,
            fontname=BOLD,
            color=DARK,
        )

        budget_x = MARGIN + card_width + 34
        budget_text = f"INR {trip.budget}" if trip.budget else "Flexible"
        page.insert_text(
            (budget_x, card_top + 22), "BUDGET & COST", fontsize=9, fontname=REGULAR, color=MUTED
        )
        page.insert_text(
            (budget_x, card_top + 42),
            f"Budget: {budget_text}  |  Est: INR {total_cost}",
            fontsize=11,
            fontname=BOLD,
            color=DARK,
        )

        cursor.y = card_top + card_height + 40

        if not by_date:
            cursor.text(MARGIN, "No activities planned yet.", fontsize=11, color=MUTED)

        for day_date in sorted(by_date):
            day_number = (day_date - trip.start_date).days + 1
            cursor.ensure(60)
            cursor.page.draw_rect(
                fitz.Rect(MARGIN, cursor.y - 16, PAGE_WIDTH - MARGIN, cursor.y + 8),
                color=None,
                fill=DAY_BAND,
            )
            cursor.text(
                MARGIN + 10,
                f"Day {day_number}  -  {day_date.strftime('%A')}, {_format_date(day_date)}",
                fontsize=12,
                fontname=BOLD,
            )
            cursor.y += 28

            for index, activity in enumerate(by_date[day_date], start=1):
                title, kind = _activity_title(activity)
                note_lines = textwrap.wrap(activity.notes or "", width=90)
                cursor.ensure(20 + 13 * len(note_lines))

                cursor.text(MARGIN + 10, f"{index}. {title}", fontsize=11, fontname=BOLD)
                cost = activity.estimated_cost
                cost_text = f"INR {cost}" if cost else "Free"
                cost_width = fitz.get_text_length(cost_text, fontname=REGULAR, fontsize=10)
                cursor.text(PAGE_WIDTH - MARGIN - cost_width, cost_text, fontsize=10, color=MUTED)
                cursor.y += 14
                cursor.text(MARGIN + 24, kind, fontsize=9, color=MUTED)
                cursor.y += 13

                for line in note_lines:
                    cursor.text(MARGIN + 24, line, fontsize=9)
                    cursor.y += 13
                cursor.y += 6

            cursor.y += 12

        return doc.tobytes()
    finally:
        doc.close()
