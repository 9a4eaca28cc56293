"""Reporting utilities that emit Markdown summaries and change point plots."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Mapping, Sequence

import matplotlib.pyplot as plt
import numpy as np
from jinja2 import Template

_MARKDOWN_TEMPLATE = """# {{ title }}

- Source: {{ source or "unknown" }}
- Samples: {{ n_samples }}
- Detector: {{ detector.get("name", "unknown") }} (threshold={{ detector.get("threshold", "n/a") }})
- Changes: {{ (changes or matches) | length }}
{% if plot %}
![series]({{ plot }})
{% endif %}
## Changes
{% if changes %}
| index | difference | confidence | mean before | mean after |
|------:|-----------:|-----------:|------------:|-----------:|
{% for c in changes %}| {{ c.index }} | {{ "%.4f"|format(c.difference) }} | {{ "%.4f"|format(c.confidence) }} | {{ "%.4f"|format(c.before.mean) }} | {{ "%.4f"|format(c.after.mean) }} |
{% endfor %}
{% elif matches %}
| index | correlation |
|------:|------------:|
{% for m in matches %}| {{ m.index }} | {{ "%.4f"|format(m.correlation) }} |
{% endfor %}
{% else %}
No change detected for the configured thresholds.
{% endif %}
"""


def render_markdown_report(context: Mapping[str, Any], output_path: str | Path) -> Path:
    """Render a Markdown report.

    ``context`` needs ``title``, ``n_samples``, ``detector`` (a mapping from
    ``describe()``) and ``changes`` (change point dicts) or ``matches`` (marker match dicts);
    ``source`` and ``plot`` are optional.
    """

    payload = {"source": None, "plot": None, "changes": [], "matches": [], **context}
    rendered = Template(_MARKDOWN_TEMPLATE).render(**payload)
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(rendered, encoding="utf-8")
    return output


def write_plot(
    series: Sequence[float],
    change_indices: Iterable[int],
    output_path: str | Path,
    *,
    ymin: float | None = None,
    title: str = "Series with detected changes",
) -> Path:
    """Plot the series with a vertical marker at each change index."""

    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    x = np.arange(len(series))

    fig, ax = plt.subplots(figsize=(12, 4))
    ax.plot(x, series, color="#1f77b4", linewidth=1.0)
    for idx in change_indices:
        ax.axvline(x=idx, color="#000000", linewidth=1.0)
    if ymin is not None:
        ax.set_ylim(bottom=ymin)
    ax.set_title(title)
    ax.set_xlabel("Index")
    ax.set_ylabel("Value")
    ax.grid(True, linestyle="--", alpha=0.5)
    fig.tight_layout()
    fig.savefig(output)
    plt.close(fig)
    return output
