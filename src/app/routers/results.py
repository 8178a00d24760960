"""Rendered results: an HTML table of the top icons per role and a PNG chart."""
# app/routers/results.py
import io

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, Response
from sqlalchemy.orm import Session

from src.app.core.config import settings
from src.app.services import analytics
from src.credit.reports.jinja import build_results_context, render_results
from src.credit.reports.plots import plot_top_icons
from src.db.session import get_db

router = APIRouter(tags=["results"])


@router.get("/results", response_class=HTMLResponse)
async def results_page(request: Request, db: Session = Depends(get_db)):
    grouped = analytics.get_top_icons(db, limit=settings.RESULTS_TOP_N)
    context = build_results_context(
        grouped,
        stats=analytics.survey_stats(db),
        contact_email=settings.CONTACT_EMAIL,
        chart_url=str(request.url_for("results_chart")) if grouped else "",
    )
    return HTMLResponse(render_results(settings.JINJA2_TEMPLATES, "results.html", context))


@router.get("/results/chart.png", name="results_chart")
async def results_chart(db: Session = Depends(get_db)):
    grouped = analytics.get_top_icons(db, limit=settings.RESULTS_TOP_N)
    buffer = io.BytesIO()
    plot_top_icons(grouped, buffer)
    return Response(content=buffer.getvalue(), media_type="image/png")
