import matplotlib

matplotlib.use("Agg")

import numpy as np
import matplotlib.pyplot as plt
from textwrap import wrap
from typing import Any, Mapping


def _two_lines(s: str, width: int) -> str:
    """
    Wrap a label into at most two lines without breaking words.

    Parameters:
        s (str): Source label text.
        width (int): Target maximum characters for the first line.
    """
    parts = wrap(s, width=width, break_long_words=False)
    if len(parts) <= 1:
        return s
    return parts[0] + "\n" + " ".join(parts[1:])


def bar_slot(n_bars: int, bar_height: float, row_span: float = 0.9) -> float:
    """Height of one bar so that `n_bars` fit inside a role row."""
    if n_bars <= 0:
        return bar_height
    return min(bar_height, row_span / n_bars)


def bar_offsets(n_bars: int, height: float) -> list[float]:
    """Vertical offsets from the row centre, first-ranked bar on top."""
    middle = (n_bars - 1) / 2
    return [(middle - rank) * height for rank in range(n_bars)]


def _field(row: Any, name: str):
    if isinstance(row, Mapping):
        return row[name]
    return getattr(row, name)


def plot_top_icons(
    grouped: Mapping[str, list],
    save_to,
    title: str | None = "Top icons per CRediT role",
    dpi: int = 150,
    wrap_width: int = 22,
    bar_height: float = 0.26,
):
    """Plot the most selected icons per role as grouped horizontal bars.

    Each role gets one row; its icons are drawn as side-by-side bars ordered
    by rank, labelled with the icon name and vote count. An empty mapping
    produces a placeholder figure instead of failing.

    Parameters:
        grouped (Mapping[str, list]): {role_title: [row, ...]} where each row
            (dict or model) has `assigned_icon` and `selection_count`.
        save_to: Output path or writable binary buffer (PNG).
        title (str | None): Figure title; pass None to omit.
        dpi (int): Figure DPI.
        wrap_width (int): Max characters before wrapping role labels into two lines.
        bar_height (float): Maximum height of one bar; bars shrink so a role row never overlaps the next.
    """
    fig_bg = "#FBFCFE"
    ax_bg = "#F7F9FC"
    grid_c = "#D6DEE6"
    txt_c = "#2D3A45"
    palette = ["#4C84B5", "#5AA6B0", "#A3B8CC"]

    roles = list(grouped.keys())
    fig_height = max(3.0, 0.75 * len(roles) + 1.5)
    fig, ax = plt.subplots(figsize=(9.0, fig_height), dpi=dpi)
    fig.patch.set_facecolor(fig_bg)
    ax.set_facecolor(ax_bg)

    if not roles:
        ax.axis("off")
        ax.text(0.5, 0.5, "No responses yet", ha="center", va="center", color=txt_c, fontsize=14)
    else:
        y = np.arange(len(roles))[::-1].astype(float)
        vmax = 1
        for row_y, role in zip(y, roles):
            entries = grouped[role]
            height = bar_slot(len(entries), bar_height)
            for rank, (entry, offset) in enumerate(zip(entries, bar_offsets(len(entries), height))):
                count = _field(entry, "selection_count")
                vmax = max(vmax, count)
                pos = row_y + offset
                ax.barh(pos, count, height=height * 0.9, color=palette[rank % len(palette)])
                ax.text(
                    count, pos, f"  {_field(entry, 'assigned_icon')} ({count})",
                    va="center", ha="left", fontsize=8, color=txt_c,
                )

        ax.set_yticks(y)
        ax.set_yticklabels([_two_lines(r, wrap_width) for r in roles], color=txt_c, fontsize=9)
        ax.set_xlim(0, vmax * 1.35)
        ax.set_xlabel("Votes", color=txt_c)
        ax.xaxis.grid(True, color=grid_c, lw=0.8, alpha=0.85)
        ax.set_axisbelow(True)
        for side in ("top", "right"):
            ax.spines[side].set_visible(False)

    if title:
        fig.suptitle(title, color=txt_c, fontsize=14, fontweight="semibold")

    fig.tight_layout()
    fig.savefig(save_to, dpi=dpi, facecolor=fig.get_facecolor(), format="png")
    plt.close(fig)
