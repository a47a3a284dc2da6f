"""Deterministic merge of pasted text, file text and fetched link text."""

from collections.abc import Sequence

from models.quote import CombinedText, LinkFetchResult

FILE_MARKER = "--- UPLOADED FILE CONTENT ---"
LINK_MARKER_TEMPLATE = "--- CONTENT FROM {url} ---"


def link_marker(url: str) -> str:
    return LINK_MARKER_TEMPLATE.format(url=url)


class ContentAggregator:
    """
    Builds the combined document handed to the extraction oracle.

    Block order is fixed: base text, uploaded file, then links in harvested
    order. Each block after the base text is introduced by a provenance marker
    so any substring can be traced back to its source.
    """

    def compose(
        self,
        base_text: str,
        file_text: str | None = None,
        link_results: Sequence[LinkFetchResult] = (),
    ) -> CombinedText:
        parts = [base_text or ""]
        markers: list[str] = []

        if file_text is not None:
            parts.append(self._block(FILE_MARKER, file_text))
            markers.append(FILE_MARKER)

        for result in link_results:
            if not result.succeeded or not result.text.strip():
                continue
            marker = link_marker(result.url)
            parts.append(self._block(marker, result.text))
            markers.append(marker)

        return CombinedText(text="".join(parts), markers=tuple(markers))

    @staticmethod
    def _block(marker: str, body: str) -> str:
        return f"\n\n{marker}\n{body}"
