"""Exception types for closeness extraction errors.

Extraction makes assumptions about the Gnod page layout: the suggestion
anchors, the position of the script block that carries the similarity
arrays, and the shape of each array. When one of those assumptions is
violated the current document is abandoned with one of the exceptions
below; no partial table is ever returned.

Retrieval failures are reported separately with FetchError, since they say
nothing about the page layout and callers usually want to retry them.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any


class ClosenessAssumptionException(Exception):
    """Base class for closeness extraction assumption violations.

    Subclasses describe which assumption failed (page structure, array
    decoding, identifier uniqueness, merge schema) and carry enough context
    to diagnose the problem without re-fetching the page.
    """

    def __init__(
        self,
        message: str,
        request_url: str = "",
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable description of the assumption violation.
            request_url: URL of the document being processed, if known.
            context: Optional dict of additional context (counts, etc).
        """
        self.message = message
        self.request_url = request_url
        self.context = context or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context.

        Returns:
            Formatted error message string.
        """
        parts = [self.message]
        if self.request_url:
            parts.append(f"URL: {self.request_url}")

        if self.context:
            parts.append("Context:")
            for key, value in self.context.items():
                parts.append(f"  {key}: {value}")

        return "\n".join(parts)


class StructuralMismatch(ClosenessAssumptionException):
    """Raised when the document structure doesn't match expectations.

    Covers a missing suggestion list, a missing scores script block, and a
    scores block without any array assignment in it. Usually means the site
    changed its layout or the page has no content for the subject.

    Attributes:
        selector: The CSS/XPath selector or regex that was used.
        selector_type: Type of selector ("css", "xpath" or "regex").
        description: What was being selected.
        expected_min: Minimum number of matches expected.
        expected_max: Maximum number of matches expected (None = unlimited).
        actual_count: Number of matches found.
    """

    def __init__(
        self,
        selector: str,
        selector_type: str,
        description: str,
        expected_min: int,
        expected_max: int | None,
        actual_count: int,
        request_url: str = "",
    ) -> None:
        self.selector = selector
        self.selector_type = selector_type
        self.description = description
        self.expected_min = expected_min
        self.expected_max = expected_max
        self.actual_count = actual_count

        if expected_max is None:
            expected_str = f"at least {expected_min}"
        elif expected_min == expected_max:
            expected_str = f"exactly {expected_min}"
        else:
            expected_str = f"between {expected_min} and {expected_max}"

        message = (
            f"Page structure mismatch: Expected {expected_str} "
            f"matches for '{description}', but found {actual_count}"
        )

        context = {
            "selector": selector,
            "selector_type": selector_type,
            "expected_min": expected_min,
            "expected_max": expected_max
            if expected_max is not None
            else "unlimited",
            "actual_count": actual_count,
        }

        super().__init__(message, request_url, context)


class ParseError(ClosenessAssumptionException):
    """Raised when the closeness row for one position can't be decoded.

    Attributes:
        position: Zero-based position index of the failing row.
        expected_count: Number of values the row should hold.
        actual_count: Number of values found (None if the row is missing).
        reason: Short description of the failure.
    """

    def __init__(
        self,
        position: int,
        reason: str,
        expected_count: int | None = None,
        actual_count: int | None = None,
        request_url: str = "",
    ) -> None:
        self.position = position
        self.reason = reason
        self.expected_count = expected_count
        self.actual_count = actual_count

        context: dict[str, Any] = {"position": position}
        if expected_count is not None:
            context["expected_count"] = expected_count
        if actual_count is not None:
            context["actual_count"] = actual_count

        super().__init__(
            f"Could not decode closeness row {position}: {reason}",
            request_url,
            context,
        )


class SchemaError(ClosenessAssumptionException):
    """Raised when merge input rows lack the pair key columns.

    Attributes:
        missing_columns: Key columns absent from the row.
        row_index: Index of the first offending row.
    """

    def __init__(self, missing_columns: Sequence[str], row_index: int) -> None:
        self.missing_columns = list(missing_columns)
        self.row_index = row_index

        super().__init__(
            "Closeness records are missing required columns: "
            + ", ".join(self.missing_columns),
            context={"row_index": row_index},
        )


class RecordValueError(ClosenessAssumptionException):
    """Raised when a merge input row holds a value of the wrong type.

    Attributes:
        column: Name of the offending column.
        value: The raw value found in the row.
        row_index: Index of the offending row.
    """

    def __init__(self, column: str, value: Any, row_index: int) -> None:
        self.column = column
        self.value = value
        self.row_index = row_index

        super().__init__(
            f"Closeness record {row_index} has a non-numeric "
            f"'{column}' value: {value!r}",
            context={"column": column, "row_index": row_index},
        )


class IdentifierError(ClosenessAssumptionException):
    """Raised when normalized item ids are empty or collide on one page.

    Attributes:
        item_id: The offending normalized id ("" for an empty id).
        raw_refs: The raw URL fragments that produced it.
    """

    def __init__(
        self,
        item_id: str,
        raw_refs: Sequence[str],
        request_url: str = "",
    ) -> None:
        self.item_id = item_id
        self.raw_refs = list(raw_refs)

        if item_id:
            message = (
                f"Item id '{item_id}' is produced by "
                f"{len(self.raw_refs)} different entries"
            )
        else:
            message = "Item reference normalizes to an empty id"

        super().__init__(
            message, request_url, {"raw_refs": self.raw_refs}
        )


class FetchError(Exception):
    """Raised when a page can't be retrieved.

    The core never retries; whether to retry, skip or halt is up to the
    caller.

    Attributes:
        url: The URL that failed.
        reason: Human-readable failure reason.
        status_code: HTTP status code, when a response was received.
        message: Human-readable error message.
    """

    def __init__(
        self,
        url: str,
        reason: str,
        status_code: int | None = None,
    ) -> None:
        self.url = url
        self.reason = reason
        self.status_code = status_code

        if status_code is not None:
            self.message = f"HTTP {status_code} from {url}: {reason}"
        else:
            self.message = f"Failed to fetch {url}: {reason}"
        super().__init__(self.message)
