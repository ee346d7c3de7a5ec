"""Fixed-size paging over the filtered view."""

from __future__ import annotations

from typing import Sequence


class Pager:
    def __init__(self, page_size: int = 1):
        if page_size <= 0:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self.page_size = page_size
        self.current_page = 0
        self.total_pages = 1

    def refresh(self, view_size: int, page_size: int | None = None) -> None:
        """Recompute the page count and clamp the current page into range."""
        if page_size is not None:
            if page_size <= 0:
                raise ValueError(f"page_size must be positive, got {page_size}")
            self.page_size = page_size
        self.total_pages = max(1, (max(0, view_size) + self.page_size - 1) // self.page_size)
        self.current_page = max(0, min(self.current_page, self.total_pages - 1))

    def next_page(self) -> bool:
        if self.current_page < self.total_pages - 1:
            self.current_page += 1
            return True
        return False

    def prev_page(self) -> bool:
        if self.current_page > 0:
            self.current_page -= 1
            return True
        return False

    def goto_page(self, index: int) -> bool:
        target = max(0, min(index, self.total_pages - 1))
        changed = target != self.current_page
        self.current_page = target
        return changed

    def scroll(self, amount: float) -> bool:
        # wheel up (positive) goes back a page
        if amount > 0:
            return self.prev_page()
        if amount < 0:
            return self.next_page()
        return False

    def page_bounds(self) -> tuple[int, int]:
        start = self.current_page * self.page_size
        return start, start + self.page_size

    def page_slice(self, view: Sequence) -> list:
        start, end = self.page_bounds()
        return list(view[start:end])

    def label(self) -> str:
        return f"Page {self.current_page + 1} / {self.total_pages}"


__all__ = ["Pager"]
