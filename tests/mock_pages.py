"""Synthetic Gnod map pages for tests.

The generated pages follow the live site's layout: two unrelated inline
scripts in the head, then the scores script with one ``Aid[i]=new Array()``
assignment per item, and the suggestion anchors in the body. The subject's
own anchor comes first and has no href.
"""

from collections.abc import Sequence

from lxml import html

from gnod_closeness.common.checked_html import CheckedHtmlElement

PAGE_URL = "https://www.music-map.com/the+beatles"
SUBJECT_REF = "the+beatles"

# (display name, href); None for the subject's own anchor
BEATLES_ITEMS: list[tuple[str, str | None]] = [
    ("The Beatles", None),
    ("Queen", "queen"),
    ("Pink Floyd", "pink+floyd"),
    ("Simon & Garfunkel", "simon+%26+garfunkel"),
]

BEATLES_MATRIX: list[list[float]] = [
    [-1, 8.1, 6.4, 3],
    [8.1, -1, 5.5, -1],
    [6.4, 5.5, -1, 2.25],
    [3, -1, 2.25, -1],
]

BEATLES_IDS = ["the_beatles", "queen", "pink_floyd", "simon_garfunkel"]


def generate_map_html(
    items: Sequence[tuple[str, str | None]] = BEATLES_ITEMS,
    matrix: Sequence[Sequence[float]] | None = BEATLES_MATRIX,
    row_overrides: dict[int, str] | None = None,
    omit_rows: Sequence[int] = (),
    leading_scripts: int = 2,
) -> str:
    """Render a map page.

    Args:
        items: Anchors to render, in order.
        matrix: Score rows; None renders a scores script without arrays.
        row_overrides: Raw ``new Array(...)`` bodies replacing rows.
        omit_rows: Row positions left out of the scores script.
        leading_scripts: Unrelated scripts placed before the scores script.
    """
    row_overrides = row_overrides or {}

    head_scripts = "\n".join(
        f"<script>var tracker{n} = {{id: {n}}};</script>"
        for n in range(leading_scripts)
    )

    lines = ["var Aid = new Array();"]
    if matrix is not None:
        for position, row in enumerate(matrix):
            if position in omit_rows:
                continue
            body = row_overrides.get(
                position, ",".join(str(value) for value in row)
            )
            lines.append(f"Aid[{position}]=new Array({body});")
    scores_script = "<script>\n" + "\n".join(lines) + "\n</script>"

    anchors = []
    for position, (name, href) in enumerate(items):
        href_attr = f' href="{href}"' if href is not None else ""
        anchors.append(
            f'<a{href_attr} class="S" id="s{position}">'
            f"{html_escape(name)}</a>"
        )

    return f"""<html>
<head>
<title>Music-Map</title>
{head_scripts}
{scores_script}
</head>
<body>
<div id="gnodMap">
{chr(10).join(anchors)}
</div>
<a href="/info" class="nav">About</a>
</body>
</html>"""


def html_escape(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;")


def parse_page(page_html: str, url: str = PAGE_URL) -> CheckedHtmlElement:
    return CheckedHtmlElement(html.fromstring(page_html), url)
