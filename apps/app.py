# -*- coding: utf-8 -*-
import html
from typing import Any, Dict, List, Sequence, Tuple

import gradio as gr

from trip_search.config import configure_logging
from trip_search.container import get_container
from trip_search.domain.models import SearchFilters, SearchResult, Trip
from trip_search.services import SearchSession, TripSearchService

# ============================ CONFIG ============================
EXAMPLE_QUERIES: List[str] = [
    "Show me safaris under $3,000",
    "Luxury trips in Asia",
    "Adventures longer than 10 days",
    "Beach destinations for summer",
    "Cultural experiences in Europe",
]

configure_logging()
SERVICE: TripSearchService = get_container().resolve(TripSearchService)


def _chip_label(name: str, value: Any) -> str:
    if name == "maxPrice":
        return f"💲 Under ${value:,.0f}"
    if name == "minPrice":
        return f"💲 Over ${value:,.0f}"
    if name == "maxDuration":
        return f"⏱️ Under {value} days"
    if name == "minDuration":
        return f"⏱️ Over {value} days"
    icons = {
        "destinations": "📍",
        "types": "🏷️",
        "seasons": "🌸",
        "activities": "🏃",
        "keywords": "🔎",
    }
    return f"{icons.get(name, '')} {', '.join(value)}".strip()


def _chips(filters: SearchFilters) -> List[Tuple[str, str]]:
    return [(_chip_label(name, value), name) for name, value in filters.to_dict().items()]


def _trip_card(trip: Trip) -> str:
    activities = ", ".join(html.escape(a) for a in trip.activities)
    image = (
        f'<img src="{html.escape(trip.image)}" style="width:100%;border-radius:8px;" />'
        if trip.image
        else ""
    )
    return (
        '<div style="border:1px solid #e5e7eb;border-radius:10px;padding:12px;">'
        f"{image}"
        f"<h3>{html.escape(trip.name)}</h3>"
        f"<p>📍 {html.escape(trip.destination)} • ${trip.price:,.0f} • "
        f"{trip.duration} days • {trip.type.value} • {trip.season.value}</p>"
        f"<p>{html.escape(trip.description)}</p>"
        f"<p><small>{activities}</small></p>"
        "</div>"
    )


def _render_trips(trips: Sequence[Trip]) -> str:
    cards = "".join(_trip_card(trip) for trip in trips)
    return (
        '<div style="display:grid;grid-template-columns:repeat(auto-fill,'
        f'minmax(280px,1fr));gap:16px;">{cards}</div>'
    )


def _render_summary(result: SearchResult) -> str:
    lines = []
    if result.phase == "preview":
        lines.append("⏳ Instant results, refining…")
    if result.explanation:
        lines.append(f"💡 {result.explanation}")
    if result.filters.active_count:
        lines.append(f"{result.count} trip{'s' if result.count != 1 else ''} found")
    if result.hint:
        lines.append(f"❌ {result.hint}")
    return "\n\n".join(lines)


def _outputs(result: SearchResult) -> Tuple[str, str, Any, Dict[str, Any]]:
    chips = _chips(result.filters)
    return (
        _render_trips(result.trips),
        _render_summary(result),
        gr.update(choices=chips, value=[value for _, value in chips]),
        result.filters.to_dict(),
    )


async def on_search(query: str, session: SearchSession):
    async for result in session.search_stream(query):
        yield _outputs(result)


def on_chips_edit(
    selected: List[str], filters_state: Dict[str, Any], session: SearchSession
):
    filters = SearchFilters.from_dict(filters_state or {})
    if not selected:
        return _outputs(session.clear_filters())
    for name in list(filters.to_dict()):
        if name not in selected:
            filters = filters.without(name)
    return _outputs(session.refine(filters))


def on_clear(session: SearchSession):
    return ("",) + _outputs(session.clear_filters())


with gr.Blocks(title="Trip Search") as app:
    gr.Markdown("# ✈️ Trip Search\nDescribe the trip you are looking for.")

    filters_state = gr.State({})
    # one session per browser tab: searches in other tabs never supersede it
    session = gr.State(lambda: SearchSession(SERVICE))

    with gr.Row():
        query_box = gr.Textbox(
            label="🔎 Search",
            placeholder="Try: 'Show me luxury trips under $3,000 longer than 7 days'",
            scale=4,
        )
        btn_search = gr.Button("🚀 Search", scale=1)
        btn_clear = gr.Button("🧹 Show all", scale=1)

    gr.Examples(EXAMPLE_QUERIES, inputs=query_box)

    summary_md = gr.Markdown()
    chips = gr.CheckboxGroup(choices=[], label="Active filters (untick to remove)")
    results_html = gr.HTML(_render_trips(SERVICE.preview_sync("")))

    outputs = [results_html, summary_md, chips, filters_state]
    btn_search.click(on_search, inputs=[query_box, session], outputs=outputs)
    query_box.submit(on_search, inputs=[query_box, session], outputs=outputs)
    chips.input(on_chips_edit, inputs=[chips, filters_state, session], outputs=outputs)
    btn_clear.click(on_clear, inputs=session, outputs=[query_box] + outputs)


if __name__ == "__main__":
    app.launch()
