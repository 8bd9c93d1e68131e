"""Minimal HTML pages for the callback server.

All dynamic values are escaped; debug sections are only rendered when the
caller passes debug data, which use cases only produce in debug mode.
"""

import json
from html import escape
from typing import Any

_PAGE = """<!DOCTYPE html>
<html lang="{lang}">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{title}</title>
<style>
body {{ font-family: system-ui, sans-serif; max-width: 40rem; margin: 3rem auto; padding: 0 1rem; }}
.success {{ color: #1a7f37; }}
.failure {{ color: #cf222e; }}
pre {{ background: #f6f8fa; padding: 1rem; overflow-x: auto; }}
</style>
</head>
<body>
<h1 class="{css_class}">{title}</h1>
{body}
</body>
</html>
"""


def render_page(
    title: str,
    message: str,
    *,
    success: bool,
    lang: str = "en",
    debug_title: str | None = None,
    debug: dict[str, Any] | None = None,
) -> str:
    """Render a result page."""
    body = f"<p>{escape(message)}</p>"
    if debug:
        dump = json.dumps(debug, ensure_ascii=False, indent=2, default=str)
        body += (
            f"\n<h2>{escape(debug_title or 'Debug')}</h2>"
            f"\n<pre>{escape(dump)}</pre>"
        )
    return _PAGE.format(
        lang=escape(lang),
        title=escape(title),
        css_class="success" if success else "failure",
        body=body,
    )


def render_index(title: str, intro: str, endpoints: list[str], lang: str = "en") -> str:
    """Render the status page listing the served endpoints."""
    items = "\n".join(f"<li><code>{escape(e)}</code></li>" for e in endpoints)
    body = f"<p>{escape(intro)}</p>\n<ul>\n{items}\n</ul>"
    return _PAGE.format(
        lang=escape(lang), title=escape(title), css_class="success", body=body
    )
