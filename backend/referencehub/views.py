"""
ReferenceHub Backend — HTML Views
=================================

What:  Server-rendered HTML for the guest page (GET / and POST /entries).
How:   Plain string building with every user-supplied value passed through
       html.escape. The only unescaped fragment is the embed snippet that
       the oEmbed provider returned at creation time.
Who:   routes/pages.py
"""

from html import escape
from typing import Dict, List, Optional

from referencehub.schemas.entry import EntryResponse, SchemaVersion

PAGE_STYLE = """
body { font-family: system-ui, sans-serif; margin: 0; background: #f6f7f9; color: #1d2430; }
header.hero { background: #1d2430; color: #fff; padding: 2rem 1rem; }
main { max-width: 760px; margin: 0 auto; padding: 1rem; }
.panel { background: #fff; border-radius: 8px; padding: 1rem 1.25rem; margin-bottom: 1rem; }
.alert--error { color: #a4161a; } .alert--success { color: #2b9348; }
.entry { border-top: 1px solid #e3e6ea; padding: .75rem 0; list-style: none; }
.entry__meta { font-size: .85rem; color: #6b7280; display: flex; gap: 1rem; }
.tag-list { display: flex; gap: .5rem; padding: 0; } .tag { list-style: none; color: #3a86ff; }
label { display: block; margin: .5rem 0; } input, textarea { width: 100%; }
"""


def _value(defaults: Optional[Dict[str, str]], key: str) -> str:
    return escape((defaults or {}).get(key, "") or "")


def _link(url: str) -> str:
    """Anchor for http(s) URLs; other schemes are shown as text only."""
    text = escape(url)
    if url.startswith(("http://", "https://")):
        return f'<a class="entry__link" href="{text}" target="_blank" rel="noopener noreferrer">{text}</a>'
    return f'<span class="entry__link">{text}</span>'


def render_entry(entry: EntryResponse) -> str:
    """One <li> for the entry list."""
    parts = [
        f'<li class="entry" id="entry-{escape(entry.id)}">',
        '<div class="entry__meta">',
        f'<span class="entry__host">{escape(entry.hostname)}</span>',
        f'<time datetime="{escape(entry.created_at)}">{escape(entry.created_at)}</time>',
        "</div>",
        _link(entry.url),
    ]
    if entry.context:
        parts.append(f'<p class="entry__context">{escape(entry.context)}</p>')
    if entry.note:
        parts.append(f'<p class="entry__note">{escape(entry.note)}</p>')
    if entry.slide_url:
        parts.append(f'<p class="entry__slides">Slides: {_link(entry.slide_url)}</p>')
    if entry.tags:
        tags = "".join(f'<li class="tag">#{escape(tag)}</li>' for tag in entry.tags)
        parts.append(f'<ul class="tag-list">{tags}</ul>')
    if entry.tweet_embed_html:
        parts.append(f'<div class="entry__embed">{entry.tweet_embed_html}</div>')
    parts.append("</li>")
    return "".join(parts)


def render_form(
    defaults: Optional[Dict[str, str]],
    open_form: bool,
    version: SchemaVersion,
) -> str:
    """Submission form; fields follow the active entry shape."""
    note_required = " required" if version == SchemaVersion.LEGACY else ""
    fields = [
        '<label>URL <input type="url" name="url" placeholder="https://example.com/article" '
        f'required value="{_value(defaults, "url")}"></label>',
    ]
    if version == SchemaVersion.CURRENT:
        fields.append(
            '<label>Context <textarea name="context" rows="2" maxlength="500" required '
            'placeholder="Where or how did you use this?">'
            f'{_value(defaults, "context")}</textarea></label>'
        )
    fields.append(
        f'<label>Note <textarea name="note" rows="3" maxlength="500"{note_required}>'
        f'{_value(defaults, "note")}</textarea></label>'
    )
    if version == SchemaVersion.CURRENT:
        fields.append(
            '<label>Slides URL (optional) <input type="url" name="slideUrl" '
            f'value="{_value(defaults, "slideUrl")}"></label>'
        )
    fields.append(
        '<label>Tags (comma-separated, up to 5) <input type="text" name="tags" '
        f'placeholder="design, inspiration" value="{_value(defaults, "tags")}"></label>'
    )
    open_attr = " open" if open_form else ""
    return (
        f'<details class="panel" id="submit"{open_attr}><summary>+ Share a URL</summary>'
        '<form method="post" action="/entries" class="archive-form">'
        + "".join(fields)
        + '<button type="submit">Share</button></form></details>'
    )


def render_home_page(
    entries: List[EntryResponse],
    total: int,
    *,
    query: Optional[str] = None,
    error: Optional[str] = None,
    submitted: bool = False,
    defaults: Optional[Dict[str, str]] = None,
    open_form: bool = False,
    version: SchemaVersion = SchemaVersion.CURRENT,
) -> str:
    """Full HTML document for the listing page."""
    alerts = ""
    if error:
        alerts = f'<p class="alert alert--error">{escape(error)}</p>'
    elif submitted:
        alerts = '<p class="alert alert--success">Thanks! Your entry was shared.</p>'

    if query:
        summary = f"{len(entries)} entries match “{escape(query)}” out of {total}"
    else:
        summary = f"Search across all {total} entries"

    if entries:
        listing = '<ul class="entry-list">' + "".join(render_entry(e) for e in entries) + "</ul>"
    elif query:
        listing = '<p class="empty">No entries match your search.</p>'
    else:
        listing = '<p class="empty">Nothing here yet. Be the first to share a URL!</p>'

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>ReferenceHub</title>
<style>{PAGE_STYLE}</style>
</head>
<body>
<header class="hero"><p class="badge">Guest Mode</p><h1>ReferenceHub</h1>
<p class="tagline">Share the URLs you found useful, with a note on how you used them. No login needed.</p></header>
<main>
<section class="panel search-panel">
{alerts}
<form method="get" action="/" class="search-form">
<input type="search" name="q" placeholder="Search URLs, notes, tags" value="{escape(query or "")}" aria-label="Search entries">
<button type="submit">Search</button>
</form>
<p class="search-summary">{summary}</p>
</section>
{render_form(defaults, open_form, version)}
<section class="panel" id="entries">
<h2>Shared references</h2>
{listing}
</section>
</main>
</body>
</html>"""
