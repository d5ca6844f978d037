from __future__ import annotations

import http.client
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from ratefeed.config.settings import SourceSettings
from ratefeed.errors import SourceUnavailableError


class CbrSource:
    """Daily rates document published by the Central Bank of Russia."""

    def __init__(self, config: SourceSettings) -> None:
        self.url = config.url
        self.user_agent = config.user_agent
        self.timeout = config.request_timeout_seconds

    def get_currency_data(self) -> bytes:
        request = Request(self.url, headers={"User-Agent": self.user_agent})
        try:
            with urlopen(request, timeout=self.timeout) as response:
                body = response.read()
        except HTTPError as exc:
            raise SourceUnavailableError(
                f"{self.url} answered with HTTP {exc.code}"
            ) from exc
        except (URLError, OSError, http.client.HTTPException) as exc:
            raise SourceUnavailableError(f"cannot reach {self.url}: {exc}") from exc

        if not body:
            raise SourceUnavailableError(f"{self.url} returned an empty body")
        return body

    def __repr__(self) -> str:
        return f"CbrSource(url='{self.url}')"
