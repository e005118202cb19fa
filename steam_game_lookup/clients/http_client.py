from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any

import requests

from ..config import REQUEST
from ..utils.utilities import call_once, raise_on_new_failure, request_failures_count


@dataclass
class HTTPClient:
    """
    Small helper to standardize a single request attempt + stats counting.

    Provider clients pass in their own `requests.Session`, `stats` dict, and the desired
    counter key per endpoint. There is no retry: a failed attempt returns `on_fail_return`
    (or raises UpstreamError when `raise_on_failure` is set).
    """

    session: requests.Session
    stats: dict[str, Any] | None = None

    def _bump(self, key: str) -> None:
        if self.stats is None:
            return
        self.stats[key] = int(self.stats.get(key, 0) or 0) + 1

    def _bump_ms(self, key: str, elapsed_ms: int) -> None:
        if self.stats is None:
            return
        ms_key = f"{key}_ms"
        self.stats[ms_key] = int(self.stats.get(ms_key, 0) or 0) + int(elapsed_ms)

    @staticmethod
    def format_timing(stats: dict[str, Any] | None, *, key: str) -> str:
        """
        Format request counter and cumulative time for a key tracked via `_bump()`.
        """
        if not stats:
            return f"{key}=0"
        count = int(stats.get(key, 0) or 0)
        ms = int(stats.get(f"{key}_ms", 0) or 0)
        return f"{key}={count} ({ms}ms)"

    def _get(
        self,
        url: str,
        *,
        params: dict[str, Any] | None,
        headers: dict[str, str] | None,
        timeout_s: float,
        counter_key: str,
    ) -> requests.Response:
        self._bump(counter_key)
        kwargs: dict[str, Any] = {"timeout": timeout_s}
        if params is not None:
            kwargs["params"] = params
        if headers is not None:
            kwargs["headers"] = headers
        t0 = time.perf_counter()
        r = self.session.get(url, **kwargs)
        t1 = time.perf_counter()
        self._bump_ms(counter_key, int(round((t1 - t0) * 1000.0)))
        r.raise_for_status()
        return r

    def _call(
        self,
        request_fn: Any,
        *,
        context: str,
        on_fail_return: Any,
        raise_on_failure: bool,
        quiet: bool,
    ) -> Any:
        before = request_failures_count(self.stats)
        data = call_once(
            request_fn,
            on_fail_return=on_fail_return,
            context=context,
            stats=self.stats,
            quiet=quiet,
        )
        if raise_on_failure and data is on_fail_return:
            raise_on_new_failure(self.stats, before=before, context=context)
        return data

    def get_json(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        timeout_s: float = REQUEST.timeout_s,
        counter_key: str = "http_get",
        context: str,
        on_fail_return: Any = None,
        raise_on_failure: bool = False,
        quiet: bool = False,
    ) -> Any:
        def _request() -> Any:
            return self._get(
                url,
                params=params,
                headers=headers,
                timeout_s=timeout_s,
                counter_key=counter_key,
            ).json()

        return self._call(
            _request,
            context=context,
            on_fail_return=on_fail_return,
            raise_on_failure=raise_on_failure,
            quiet=quiet,
        )

    def get_text(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        timeout_s: float = REQUEST.timeout_s,
        counter_key: str = "http_get",
        context: str,
        on_fail_return: Any = None,
        raise_on_failure: bool = False,
        quiet: bool = False,
    ) -> Any:
        def _request() -> Any:
            return self._get(
                url,
                params=params,
                headers=headers,
                timeout_s=timeout_s,
                counter_key=counter_key,
            ).text

        return self._call(
            _request,
            context=context,
            on_fail_return=on_fail_return,
            raise_on_failure=raise_on_failure,
            quiet=quiet,
        )


@dataclass
class HTTPRequestDefaults:
    timeout_s: float = REQUEST.timeout_s
    headers: dict[str, str] | None = None
    counter_key: str = "http_get"
    context_prefix: str | None = None
    # Best-effort endpoints log failures at DEBUG.
    quiet: bool = False


@dataclass
class ConfiguredHTTPClient:
    """
    Convenience wrapper over HTTPClient that carries default parameters.

    This keeps provider code concise by instantiating a per-endpoint client configured with
    its counter key, headers, timeout, etc.
    """

    http: HTTPClient
    defaults: HTTPRequestDefaults

    def _ctx(self, context: str) -> str:
        prefix = self.defaults.context_prefix
        if prefix:
            return f"{prefix}{': ' if context else ''}{context}"
        return context

    def get_json(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        context: str = "",
        on_fail_return: Any = None,
        raise_on_failure: bool = False,
    ) -> Any:
        return self.http.get_json(
            url,
            params=params,
            headers=self.defaults.headers,
            timeout_s=self.defaults.timeout_s,
            counter_key=self.defaults.counter_key,
            context=self._ctx(context),
            on_fail_return=on_fail_return,
            raise_on_failure=raise_on_failure,
            quiet=self.defaults.quiet,
        )

    def get_text(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        context: str = "",
        on_fail_return: Any = None,
        raise_on_failure: bool = False,
    ) -> Any:
        return self.http.get_text(
            url,
            params=params,
            headers=self.defaults.headers,
            timeout_s=self.defaults.timeout_s,
            counter_key=self.defaults.counter_key,
            context=self._ctx(context),
            on_fail_return=on_fail_return,
            raise_on_failure=raise_on_failure,
            quiet=self.defaults.quiet,
        )
