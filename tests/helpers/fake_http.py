"""In-memory transport used by the mirroring tests."""

import threading

from site_mirror import FetchResult, HTTPStatusError, Settings


def fast_settings(tmp_path, **overrides):
    values = dict(
        delay_between_requests_ms=0,
        retry_backoff_ms=0,
        report_dir=str(tmp_path / "reports"),
    )
    values.update(overrides)
    return Settings(**values)


def make_result(url, body, content_type="text/html", headers=None):
    if isinstance(body, str):
        body = body.encode("utf-8")
    merged = {"Content-Type": content_type}
    merged.update(headers or {})
    return FetchResult(url=url, status=200, headers=merged, body=body, final_url=url)


class FakeTransport:
    def __init__(self):
        self.routes = {}
        self.calls = []
        self._lock = threading.Lock()

    def add(self, url, body, content_type="text/html", headers=None):
        self.routes[url] = make_result(url, body, content_type, headers)
        return self

    def add_handler(self, url, handler):
        self.routes[url] = handler
        return self

    def count(self, url):
        with self._lock:
            return self.calls.count(url)

    def get(self, url):
        with self._lock:
            self.calls.append(url)
        route = self.routes.get(url)
        if route is None:
            raise HTTPStatusError(url, 404)
        if isinstance(route, Exception):
            raise route
        if callable(route):
            return route(url)
        return route

    def close(self):
        pass


class FlakyRoute:
    """Fails ``failures`` times with ``error`` before serving ``result``."""

    def __init__(self, result, failures, error):
        self.result = result
        self.failures = failures
        self.error = error
        self.calls = 0

    def __call__(self, url):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error
        return self.result
