"""Checked HTML document wrapper for count-validated querying.

CheckedHtmlElement wraps an lxml.html.HtmlElement and validates the number
of results of every selector query against an expected range, so a page
whose layout changed fails loudly with StructuralMismatch instead of
yielding an empty or truncated extraction.
"""

from __future__ import annotations

from lxml.html import HtmlElement

from gnod_closeness.common.exceptions import StructuralMismatch


class CheckedHtmlElement:
    """Wrapper around HtmlElement with validated selectors.

    This is the "parsed document" handed to the extractors. Anything not
    defined here is delegated to the wrapped element.
    """

    def __init__(self, element: HtmlElement, request_url: str = "") -> None:
        """Initialize the checked element wrapper.

        Args:
            element: The lxml HtmlElement to wrap.
            request_url: Optional URL for error context.
        """
        self._element = element
        self._request_url = request_url

    @property
    def request_url(self) -> str:
        return self._request_url

    @property
    def element(self) -> HtmlElement:
        return self._element

    def _check_count(
        self,
        selector: str,
        selector_type: str,
        description: str,
        actual_count: int,
        min_count: int,
        max_count: int | None,
    ) -> None:
        if actual_count < min_count or (
            max_count is not None and actual_count > max_count
        ):
            raise StructuralMismatch(
                selector=selector,
                selector_type=selector_type,
                description=description,
                expected_min=min_count,
                expected_max=max_count,
                actual_count=actual_count,
                request_url=self._request_url,
            )

    def checked_xpath(
        self,
        xpath: str,
        description: str,
        min_count: int = 1,
        max_count: int | None = None,
    ) -> list[CheckedHtmlElement]:
        """Execute XPath query with count validation.

        Args:
            xpath: XPath expression to execute.
            description: Human-readable description of what's being selected.
            min_count: Minimum number of results expected (default: 1).
            max_count: Maximum number of results expected (None = unlimited).

        Returns:
            List of matching elements, in document order. Non-element
            results (text, attributes) are not counted.

        Raises:
            StructuralMismatch: If count doesn't match expectations.

        Example::

            doc = CheckedHtmlElement(lxml.html.fromstring(html))
            scripts = doc.checked_xpath("//script", "script blocks", 3)
        """
        results = self._element.xpath(xpath)

        wrapped = [
            CheckedHtmlElement(r, self._request_url)
            for r in results
            if isinstance(r, HtmlElement)
        ]
        self._check_count(
            xpath, "xpath", description, len(wrapped), min_count, max_count
        )
        return wrapped

    def checked_css(
        self,
        selector: str,
        description: str,
        min_count: int = 1,
        max_count: int | None = None,
    ) -> list[CheckedHtmlElement]:
        """Execute CSS selector query with count validation.

        Args:
            selector: CSS selector expression.
            description: Human-readable description of what's being selected.
            min_count: Minimum number of elements expected (default: 1).
            max_count: Maximum number of elements expected (None = unlimited).

        Returns:
            List of matching CheckedHtmlElements, in document order.

        Raises:
            StructuralMismatch: If count doesn't match expectations, or the
                selector is invalid.
        """
        try:
            results = self._element.cssselect(selector)
        except Exception as e:
            raise StructuralMismatch(
                selector=selector,
                selector_type="css",
                description=description,
                expected_min=min_count,
                expected_max=max_count,
                actual_count=0,
                request_url=self._request_url,
            ) from e

        self._check_count(
            selector, "css", description, len(results), min_count, max_count
        )
        return [
            CheckedHtmlElement(result, self._request_url)
            for result in results
        ]

    def __getattr__(self, name: str):
        """Delegate all other attributes to the wrapped element."""
        return getattr(self._element, name)


def ensure_checked(
    document: CheckedHtmlElement | HtmlElement,
) -> CheckedHtmlElement:
    """Wrap a bare lxml element; pass a CheckedHtmlElement through."""
    if isinstance(document, CheckedHtmlElement):
        return document
    return CheckedHtmlElement(document)
