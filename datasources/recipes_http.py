"""Recipe oracle backed by a static HTTP file host.

``has_recipe`` issues ``HEAD {base_url}/{path}.json``.  A 200 means the recipe
exists and a 404 means it does not; any other outcome raises
:class:`RecipeLookupError`, which the craftability index records as "not
craftable" for that call.
"""

from __future__ import annotations

import logging
from typing import Optional

import requests
from requests import exceptions as rqexc

from datasources.http import get_shared_session
from engine.catalog import id_path

log = logging.getLogger(__name__)


class RecipeLookupError(Exception):
    """Raised when the remote recipe host gives no usable answer."""


class HttpRecipeOracle:
    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session

    def recipe_url(self, item_id: str) -> str:
        return f"{self.base_url}/{id_path(item_id)}.json"

    def has_recipe(self, item_id: str) -> bool:
        url = self.recipe_url(item_id)
        sess = self._session or get_shared_session()
        try:
            r = sess.head(url, timeout=self.timeout, allow_redirects=True)
        except (rqexc.Timeout, rqexc.ConnectionError) as e:
            raise RecipeLookupError(f"{url}: {type(e).__name__}") from e
        code = r.status_code
        if code == 200:
            return True
        if code == 404:
            return False
        log.debug("Unexpected status %s for %s", code, url)
        raise RecipeLookupError(f"{url}: HTTP {code}")


__all__ = ["HttpRecipeOracle", "RecipeLookupError"]
