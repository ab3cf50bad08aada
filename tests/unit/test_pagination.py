"""Tests for local pagination state."""

import pytest

from game_catalog.catalog.pagination import PaginationState


class TestPaginationState:
    """Tests for PaginationState."""

    def test_defaults(self) -> None:
        """Test default page size and position."""
        state = PaginationState()
        assert state.page_size == 32
        assert state.current_page == 1

    @pytest.mark.parametrize(("count", "pages"), [(0, 0), (1, 1), (32, 1), (33, 2), (100, 4)])
    def test_total_pages(self, count: int, pages: int) -> None:
        """Test page count is ceil(count / page_size)."""
        assert PaginationState().total_pages(count) == pages

    def test_slice(self) -> None:
        """Test slicing returns the current page's window."""
        state = PaginationState(page_size=10, current_page=3)
        assert state.slice(list(range(25))) == list(range(20, 25))

    def test_move_within_bounds(self) -> None:
        """Test moving forward and back inside the range."""
        state = PaginationState()
        assert state.move(1, 100) is True
        assert state.current_page == 2
        assert state.move(-1, 100) is True
        assert state.current_page == 1

    def test_move_out_of_bounds_is_ignored(self) -> None:
        """Test moves past either end do nothing."""
        state = PaginationState()
        assert state.move(-1, 100) is False
        assert state.current_page == 1

        state.current_page = 4
        assert state.move(1, 100) is False
        assert state.current_page == 4

    def test_move_on_empty_view_is_ignored(self) -> None:
        """Test no move is possible without results."""
        state = PaginationState()
        assert state.move(1, 0) is False
        assert state.move(-1, 0) is False

    @pytest.mark.parametrize(
        ("page", "count", "expected"),
        [(5, 100, 4), (3, 0, 1), (0, 10, 1), (2, 40, 2)],
    )
    def test_clamp(self, page: int, count: int, expected: int) -> None:
        """Test clamping keeps 1 <= page <= max(1, total_pages)."""
        state = PaginationState(current_page=page)
        assert state.clamp(count) == expected

    def test_has_more_remote(self) -> None:
        """Test remote cursor comparison."""
        state = PaginationState(remote_total_pages=3, remote_current_page=2)
        assert state.has_more_remote is True
        state.remote_current_page = 3
        assert state.has_more_remote is False
