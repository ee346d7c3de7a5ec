import threading
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

# Recipe checks come from the single warm-up worker plus a few bounded
# lookups on the UI thread, each with its own session.
POOL_SIZE = 2
USER_AGENT = "ItemCatalogBrowser/1.0"

_session_local = threading.local()


def _recipe_retry() -> Retry:
    # one quick retry; a dead host must not stall a filter pass
    return Retry(
        total=1,
        connect=1,
        read=1,
        backoff_factor=0.2,
        status_forcelist=[429, 502, 503, 504],
        allowed_methods=["HEAD", "GET"],
        raise_on_status=False,
    )


def _new_session() -> requests.Session:
    s = requests.Session()
    adapter = HTTPAdapter(pool_connections=1, pool_maxsize=POOL_SIZE, max_retries=_recipe_retry())
    s.mount("http://", adapter)
    s.mount("https://", adapter)
    s.headers.update({"User-Agent": USER_AGENT, "Connection": "keep-alive"})
    return s


def get_shared_session() -> requests.Session:
    """Return the calling thread's session; the warm-up worker gets its own."""
    s = getattr(_session_local, "session", None)
    if s is None:
        s = _new_session()
        _session_local.session = s
    return s
