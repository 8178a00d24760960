from typing import Any, Mapping
from jinja2 import Environment, FileSystemLoader, select_autoescape

from src.credit.catalog import icon_shape


def _as_dict(obj: Any) -> dict:
    """
    Normalize a row into a plain Python dict.

    Accepted inputs: dict/Mapping (copied) or a Pydantic model (via
    `.model_dump()`).
    """
    if isinstance(obj, Mapping):
        return dict(obj)
    if hasattr(obj, "model_dump"):
        return obj.model_dump()
    raise TypeError(f"Unsupported input type: {type(obj)!r}")


def build_results_context(
    grouped: Mapping[str, list],
    *,
    stats: Any = None,
    contact_email: str = "",
    chart_url: str = "",
) -> dict:
    """
    Convert grouped top-icon rows into the results template context.

    Parameters:
        grouped: {role_title: [row, ...]}, rows carrying `assigned_icon` and
            `selection_count` (and optionally `shape`).
        stats: Optional counts object/dict shown above the table.
        contact_email: Address printed in the footer.
        chart_url: URL of the chart image, empty to omit it.
    """
    roles = []
    for title in sorted(grouped):
        icons = []
        for row in grouped[title]:
            row = _as_dict(row)
            icons.append({
                "name": row["assigned_icon"],
                "shape": row.get("shape") or icon_shape(row["assigned_icon"]),
                "votes": row["selection_count"],
            })
        roles.append({"title": title, "icons": icons})

    return {
        "roles": roles,
        "stats": _as_dict(stats) if stats is not None else None,
        "contact_email": contact_email,
        "chart_url": chart_url,
    }


def render_results(templates_dir: str, template_name: str, context: dict) -> str:
    env = Environment(
        loader=FileSystemLoader(templates_dir),
        autoescape=select_autoescape(["html", "xml"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    return env.get_template(template_name).render(**context)
