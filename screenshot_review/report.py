"""Static HTML side-by-side review report."""

from __future__ import annotations

import html
from itertools import groupby
from pathlib import Path

from screenshot_review.manifest import ReviewEntry, ReviewManifest
from screenshot_review.utils import atomic_write_text, relative_or_absolute

STYLE = """
    :root {
      --bg: #f6f7f9;
      --card: #ffffff;
      --text: #1d232a;
      --muted: #5e6b7a;
      --line: #d9e0e6;
      --ok: #1f8f4b;
      --bad: #b33a3a;
      --hold: #7b6d0b;
    }
    body { font-family: ui-sans-serif, system-ui, -apple-system, Segoe UI, Roboto, sans-serif; background: var(--bg); color: var(--text); margin: 0; padding: 0 16px 24px; }
    header { position: sticky; top: 0; background: #fff; border-bottom: 1px solid var(--line); padding: 10px 0; }
    .stats { display: flex; gap: 14px; flex-wrap: wrap; color: var(--muted); font-size: 13px; }
    .stats strong { color: var(--text); }
    h2 { margin: 24px 0 8px; }
    h3 { margin: 16px 0 8px; color: var(--muted); }
    .cards { display: grid; grid-template-columns: repeat(auto-fill, minmax(520px, 1fr)); gap: 12px; }
    .card { background: var(--card); border: 1px solid var(--line); border-radius: 10px; padding: 10px; }
    .card.invalid-size { border-color: var(--bad); box-shadow: 0 0 0 2px rgba(179,58,58,0.15); }
    .meta { display: flex; justify-content: space-between; align-items: center; gap: 8px; margin-bottom: 8px; }
    .key { font-weight: 600; font-family: ui-monospace, monospace; font-size: 13px; }
    .badge { border: 1px solid var(--line); border-radius: 999px; padding: 2px 8px; font-size: 12px; margin-left: 4px; }
    .badge.ready, .badge.approved { border-color: var(--ok); color: var(--ok); }
    .badge.missing_raw, .badge.pending { border-color: var(--hold); color: var(--hold); }
    .badge.invalid_size { border-color: var(--bad); color: var(--bad); }
    .pair { display: flex; gap: 8px; }
    figure { flex: 1; margin: 0; border: 1px solid var(--line); border-radius: 8px; overflow: hidden; }
    figure img { width: 100%; max-height: 520px; object-fit: contain; display: block; background: #eef1f4; }
    figcaption { font-size: 11px; color: var(--muted); padding: 4px 6px; }
    .placeholder { display: flex; align-items: center; justify-content: center; height: 240px; color: var(--hold); background: #fbf8ea; font-size: 13px; }
"""


def _text(value: object) -> str:
    return html.escape(str(value), quote=True)


def _dimensions(entry_size: object) -> str:
    return str(entry_size) if entry_size else "unreadable"


def _render_figure(label: str, path: str | None, size: object, base: Path) -> str:
    if not path:
        return (
            f'<figure><div class="placeholder">{_text(label)} missing</div>'
            f"<figcaption>{_text(label)}: not found</figcaption></figure>"
        )
    src = relative_or_absolute(Path(path), base)
    return (
        f'<figure><img loading="lazy" src="{_text(src)}" alt="{_text(label)}" />'
        f"<figcaption>{_text(label)}: {_text(_dimensions(size))}</figcaption></figure>"
    )


def _render_card(entry: ReviewEntry, base: Path) -> str:
    classes = "card" if entry.size_valid else "card invalid-size"
    approval = (
        '<span class="badge approved">approved</span>'
        if entry.approved
        else '<span class="badge pending">pending</span>'
    )
    raw_path = entry.raw_path if entry.has_raw else None
    return f"""
      <div class="{classes}" id="{_text(entry.key)}">
        <div class="meta">
          <span class="key">{_text(entry.key)}</span>
          <span><span class="badge {_text(entry.status)}">{_text(entry.status)}</span>{approval}</span>
        </div>
        <div class="pair">
          {_render_figure("raw", raw_path, entry.raw_size, base)}
          {_render_figure("framed", entry.framed_path, entry.framed_size, base)}
        </div>
      </div>"""


def render_review_html(manifest: ReviewManifest, base: Path) -> str:
    """Render the manifest as a page grouped by locale, then device."""

    summary = manifest.summary
    sections: list[str] = []
    for locale, locale_entries in groupby(manifest.entries, key=lambda entry: entry.locale):
        sections.append(f"  <section>\n    <h2>{_text(locale)}</h2>")
        for device, device_entries in groupby(locale_entries, key=lambda entry: entry.device):
            cards = "".join(_render_card(entry, base) for entry in device_entries)
            sections.append(f'    <h3>{_text(device)}</h3>\n    <div class="cards">{cards}\n    </div>')
        sections.append("  </section>")
    if not manifest.entries:
        sections.append('  <p class="stats">No framed screenshots found.</p>')
    body = "\n".join(sections)

    return f"""<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>Screenshot Review</title>
  <style>{STYLE}  </style>
</head>
<body>
  <header>
    <strong>Screenshot Review</strong>
    <div class="stats">
      <span>generated <strong>{_text(manifest.generated_at)}</strong></span>
      <span>total <strong>{summary.total}</strong></span>
      <span>ready <strong>{summary.ready}</strong></span>
      <span>missing raw <strong>{summary.missing_raw}</strong></span>
      <span>invalid size <strong>{summary.invalid_size}</strong></span>
      <span>approved <strong>{summary.approved}</strong></span>
      <span>pending <strong>{summary.pending_approval}</strong></span>
    </div>
  </header>
{body}
</body>
</html>
"""


def write_review_html(manifest: ReviewManifest, html_path: Path) -> Path:
    return atomic_write_text(html_path, render_review_html(manifest, html_path.parent))
