from __future__ import annotations

from colorize.contracts import ColorizedArtifact


class PageCache:
    """
    Latest colorized artifact per page number.

    Entries are immutable artifacts, so `set` replaces a page in a single
    assignment and readers never see a half-written entry. There is no
    eviction; long documents cost memory proportional to their page count.
    """

    def __init__(self, num_pages: int | None = None) -> None:
        self._num_pages = num_pages
        self._pages: dict[int, ColorizedArtifact] = {}

    @property
    def num_pages(self) -> int | None:
        return self._num_pages

    def _check_key(self, page_num: int) -> None:
        if page_num < 1:
            raise ValueError(f"page_num must be >= 1, got {page_num}")
        if self._num_pages is not None and page_num > self._num_pages:
            raise ValueError(f"page_num out of range: {page_num} (1..{self._num_pages})")

    def get(self, page_num: int) -> ColorizedArtifact | None:
        return self._pages.get(page_num)

    def set(self, page_num: int, artifact: ColorizedArtifact) -> None:
        self._check_key(page_num)
        self._pages[page_num] = artifact

    def clear(self) -> None:
        self._pages = {}

    def reset(self, num_pages: int | None) -> None:
        self._num_pages = num_pages
        self.clear()

    def size(self) -> int:
        return len(self._pages)

    def __len__(self) -> int:
        return len(self._pages)

    def __contains__(self, page_num: object) -> bool:
        return page_num in self._pages

    def snapshot(self) -> list[tuple[int, ColorizedArtifact]]:
        """Ascending (page_num, artifact) copy for readers."""
        return sorted(self._pages.items())
