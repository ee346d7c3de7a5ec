import sys, pathlib
sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

import types

import pytest
from requests import exceptions as rqexc

from datasources.recipes_http import HttpRecipeOracle, RecipeLookupError
from engine.catalog import load_catalog
from engine.craftability import CraftabilityIndex, CraftabilityRules
from datasources.registry import StaticRegistry


class DummyResp:
    def __init__(self, status):
        self.status_code = status


def _session(statuses, seen=None):
    def fake_head(url, timeout=None, allow_redirects=False):
        if seen is not None:
            seen.append(url)
        status = statuses[url.rsplit("/", 1)[-1][:-5]]
        if isinstance(status, Exception):
            raise status
        return DummyResp(status)
    return types.SimpleNamespace(head=fake_head)


def test_status_mapping():
    seen = []
    oracle = HttpRecipeOracle(
        "https://recipes.example/data/",
        session=_session({"stick": 200, "bedrock": 404, "lava": 503}, seen),
    )
    assert oracle.has_recipe("minecraft:stick") is True
    assert oracle.has_recipe("bedrock") is False
    with pytest.raises(RecipeLookupError):
        oracle.has_recipe("lava")
    assert seen[0] == "https://recipes.example/data/stick.json"


def test_network_errors_raise_lookup_error():
    oracle = HttpRecipeOracle("http://h", session=_session({"x": rqexc.ConnectTimeout("slow")}))
    with pytest.raises(RecipeLookupError):
        oracle.has_recipe("x")


def test_index_fails_closed_on_remote_errors():
    statuses = {"bow": 200, "coal": rqexc.ConnectionError("down"), "dirt": 500}
    oracle = HttpRecipeOracle("http://h", session=_session(statuses))
    catalog = load_catalog(StaticRegistry((k, k.title(), False) for k in statuses))
    index = CraftabilityIndex(CraftabilityRules.from_lists())
    index.begin_warmup(catalog, oracle).result(timeout=5)
    assert [i for i in statuses if index.is_craftable(i)] == ["bow"]
    index.shutdown()


def test_shared_session_is_used_by_default(monkeypatch):
    seen = []
    monkeypatch.setattr(
        "datasources.recipes_http.get_shared_session", lambda: _session({"cake": 200}, seen)
    )
    assert HttpRecipeOracle("http://h").has_recipe("cake")
    assert seen == ["http://h/cake.json"]


def test_shared_session_is_per_thread_and_retries_head():
    import threading
    from datasources.http import USER_AGENT, get_shared_session

    main_session = get_shared_session()
    assert get_shared_session() is main_session
    other = []
    t = threading.Thread(target=lambda: other.append(get_shared_session()))
    t.start()
    t.join()
    assert other[0] is not main_session

    adapter = main_session.get_adapter("https://recipes.example")
    retry = adapter.max_retries
    assert retry.total == 1
    assert "HEAD" in retry.allowed_methods
    assert main_session.headers["User-Agent"] == USER_AGENT
