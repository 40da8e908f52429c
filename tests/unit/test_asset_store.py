import threading

import site_mirror
from site_mirror import (
    AssetCategory,
    AssetStore,
    CrawlState,
    StatsRecorder,
    TransportError,
)
from tests.helpers.fake_http import FakeTransport, FlakyRoute, fast_settings, make_result

BASE = "https://x.test"


def make_store(tmp_path, transport, page_sink=None, **overrides):
    stats = StatsRecorder(BASE + "/")
    store = AssetStore(
        tmp_path / "out",
        CrawlState(),
        stats,
        transport,
        fast_settings(tmp_path, **overrides),
        page_sink=page_sink,
    )
    return store, stats


def test_same_url_is_fetched_once(tmp_path):
    transport = FakeTransport().add(BASE + "/a.png", b"PNG", "image/png")
    store, stats = make_store(tmp_path, transport)

    first = store.fetch_and_store(BASE + "/a.png", AssetCategory.IMAGES)
    second = store.fetch_and_store(BASE + "/a.png#frag", AssetCategory.IMAGES)

    assert first == second == "assets/a.png"
    assert transport.count(BASE + "/a.png") == 1
    assert (tmp_path / "out" / "assets" / "a.png").read_bytes() == b"PNG"
    assert stats.finish().total == 1


def test_concurrent_requests_share_one_fetch(tmp_path):
    started = threading.Event()
    release = threading.Event()
    result = make_result(BASE + "/big.js", b"js", "application/javascript")

    def slow(url):
        started.set()
        release.wait(5)
        return result

    transport = FakeTransport().add_handler(BASE + "/big.js", slow)
    store, _ = make_store(tmp_path, transport)
    paths = []

    def worker():
        paths.append(store.fetch_and_store(BASE + "/big.js", AssetCategory.JS))

    threads = [threading.Thread(target=worker) for _ in range(3)]
    threads[0].start()
    started.wait(5)
    for t in threads[1:]:
        t.start()
    release.set()
    for t in threads:
        t.join(5)

    assert paths == ["assets/big.js"] * 3
    assert transport.count(BASE + "/big.js") == 1


def test_declared_size_over_ceiling_is_skipped(tmp_path):
    transport = FakeTransport().add(
        BASE + "/movie.mp4", b"", "video/mp4", headers={"Content-Length": "4096"}
    )
    store, stats = make_store(tmp_path, transport, max_file_size_bytes=1024)

    assert store.fetch_and_store(BASE + "/movie.mp4", AssetCategory.VIDEOS) is None
    assert store.fetch_and_store(BASE + "/movie.mp4", AssetCategory.VIDEOS) is None

    report = stats.finish()
    assert [r.url for r in report.skipped] == [BASE + "/movie.mp4"]
    assert report.failed == []
    assert transport.count(BASE + "/movie.mp4") == 1
    assert not (tmp_path / "out" / "assets" / "movie.mp4").exists()


def test_size_ceiling_ignored_when_skipping_disabled(tmp_path):
    transport = FakeTransport().add(
        BASE + "/movie.mp4", b"data", "video/mp4", headers={"Content-Length": "4096"}
    )
    store, _ = make_store(
        tmp_path, transport, max_file_size_bytes=1024, skip_large_files=False
    )

    assert store.fetch_and_store(BASE + "/movie.mp4", AssetCategory.VIDEOS) == "assets/movie.mp4"


def test_failure_is_recorded_and_not_refetched(tmp_path):
    transport = FakeTransport()
    store, stats = make_store(tmp_path, transport)

    assert store.fetch_and_store(BASE + "/missing.png", AssetCategory.IMAGES) is None
    assert store.fetch_and_store(BASE + "/missing.png", AssetCategory.IMAGES) is None

    report = stats.finish()
    assert [(r.url, r.error) for r in report.failed] == [(BASE + "/missing.png", "HTTP 404")]
    assert store.state.failed == {BASE + "/missing.png"}
    assert transport.count(BASE + "/missing.png") == 1


def test_transient_errors_are_retried_with_linear_backoff(tmp_path, monkeypatch):
    sleeps = []
    monkeypatch.setattr(site_mirror.time, "sleep", sleeps.append)
    route = FlakyRoute(
        make_result(BASE + "/s.css", "body{}", "text/css"),
        failures=2,
        error=TransportError(BASE + "/s.css", "timeout"),
    )
    transport = FakeTransport().add_handler(BASE + "/s.css", route)
    store, _ = make_store(tmp_path, transport, retry_backoff_ms=1000, max_retries=3)

    assert store.fetch_and_store(BASE + "/s.css", AssetCategory.CSS) == "assets/s.css"
    assert route.calls == 3
    assert sleeps == [1.0, 2.0]


def test_html_behind_other_reference_goes_to_page_sink(tmp_path):
    transport = FakeTransport().add(BASE + "/widget", "<html><body>hi</body></html>")
    adopted = []
    store, stats = make_store(
        tmp_path, transport, page_sink=lambda url, result: adopted.append(url)
    )

    assert store.fetch_and_store(BASE + "/widget", AssetCategory.OTHER) is None
    assert store.fetch_and_store(BASE + "/widget", AssetCategory.OTHER) is None

    assert adopted == [BASE + "/widget"]
    assert transport.count(BASE + "/widget") == 1
    assert stats.finish().total == 0


def test_stylesheet_fonts_are_downloaded_and_rewritten(tmp_path):
    css = (
        "@font-face { font-family: F; src: url('/fonts/f.woff2') format('woff2') }\n"
        "body { background: url(bg.png) }"
    )
    transport = (
        FakeTransport()
        .add(BASE + "/css/s.css", css, "text/css")
        .add(BASE + "/fonts/f.woff2", b"WOFF", "font/woff2")
    )
    store, _ = make_store(tmp_path, transport)

    assert store.fetch_and_store(BASE + "/css/s.css", AssetCategory.CSS) == "assets/s.css"

    saved = (tmp_path / "out" / "assets" / "s.css").read_text(encoding="utf-8")
    assert "url('../assets/fonts/f.woff2')" in saved
    # not downloaded yet, so left alone
    assert "url(bg.png)" in saved
    assert (tmp_path / "out" / "assets" / "fonts" / "f.woff2").read_bytes() == b"WOFF"
    assert transport.count(BASE + "/bg.png") == 0
