import sys, pathlib
sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

import math

import pytest

from engine.pager import Pager


def test_refresh_invariants():
    pager = Pager(3)
    for page_size in (1, 2, 3, 7, 50):
        for n in range(0, 40):
            pager.current_page = 99
            pager.refresh(n, page_size)
            assert pager.total_pages == max(1, math.ceil(n / page_size))
            assert 0 <= pager.current_page < pager.total_pages


def test_scenario_two_pages():
    view = ["Apple", "Bow", "Coal", "Diamond Sword"]
    pager = Pager(2)
    pager.refresh(len(view))
    assert pager.total_pages == 2
    assert pager.page_slice(view) == ["Apple", "Bow"]
    assert pager.next_page() is True
    assert pager.page_slice(view) == ["Coal", "Diamond Sword"]
    assert pager.label() == "Page 2 / 2"

    # search "d" narrows to one entry: current page clamps back to 0
    pager.refresh(1)
    assert pager.total_pages == 1 and pager.current_page == 0
    assert pager.page_slice(["Diamond Sword"]) == ["Diamond Sword"]


def test_next_prev_report_movement():
    pager = Pager(10)
    pager.refresh(25)
    assert pager.prev_page() is False
    assert pager.next_page() and pager.next_page()
    assert pager.next_page() is False
    assert pager.current_page == 2
    assert pager.prev_page() is True


def test_last_page_is_clipped():
    view = list(range(7))
    pager = Pager(3)
    pager.refresh(len(view))
    pager.goto_page(10)
    assert pager.current_page == 2
    assert pager.page_slice(view) == [6]


def test_scroll_direction():
    pager = Pager(1)
    pager.refresh(3)
    assert pager.scroll(-1.0) is True and pager.current_page == 1
    assert pager.scroll(1.0) is True and pager.current_page == 0
    assert pager.scroll(1.0) is False
    assert pager.scroll(0) is False


def test_rejects_non_positive_page_size():
    with pytest.raises(ValueError):
        Pager(0)
    with pytest.raises(ValueError):
        Pager(2).refresh(5, page_size=-1)
