from site_mirror import (
    AssetCategory,
    AssetStore,
    CrawlState,
    StatsRecorder,
    bs4_parse,
    rewrite_css_urls,
    rewrite_reference,
    rewrite_srcset_value,
    root_prefix,
)
from tests.helpers.fake_http import FakeTransport, fast_settings

BASE = "https://x.test"


def make_store(tmp_path, transport):
    return AssetStore(
        tmp_path / "out",
        CrawlState(),
        StatsRecorder(BASE + "/"),
        transport,
        fast_settings(tmp_path),
    )


def test_only_paths_written_by_the_run_count_as_local(tmp_path):
    store = make_store(tmp_path, FakeTransport())
    store.state.local_paths.add("assets/a.png")

    assert store.is_own_reference("assets/a.png", "")
    assert store.is_own_reference("../../assets/a.png#x", "../../")
    assert not store.is_own_reference("../assets/a.png", "../../")
    assert not store.is_own_reference("assets/b.png", "")


def test_root_prefix_counts_directories():
    assert root_prefix("index.html") == ""
    assert root_prefix("assets/s.css") == "../"
    assert root_prefix("docs/intro/index.html") == "../../"


def test_srcset_keeps_descriptors_and_unresolved_entries(tmp_path):
    transport = (
        FakeTransport()
        .add(BASE + "/img/a.png", b"a", "image/png")
        .add(BASE + "/img/b.png", b"b", "image/png")
    )
    store = make_store(tmp_path, transport)

    out = rewrite_srcset_value(
        "/img/a.png 1x, /img/b.png 2x, /img/gone.png 3x",
        BASE + "/",
        store,
        "",
    )

    assert out == (
        "assets/a.png 1x, assets/b.png 2x, /img/gone.png 3x"
    )


def test_css_url_pass_only_uses_stored_assets(tmp_path):
    transport = FakeTransport()
    store = make_store(tmp_path, transport)
    store.state.asset_map[BASE + "/img/bg.png"] = "assets/bg.png"
    css = (
        "a { background: url('/img/bg.png') }"
        " b { background: url(/img/other.png) }"
        " c { background: url(data:image/gif;base64,R0) }"
        " d { mask: url(#clip) }"
        " e { background: url(../assets/x.png) }"
    )

    out = rewrite_css_urls(css, BASE + "/", store, "")

    assert "url('assets/bg.png')" in out
    assert "url(/img/other.png)" in out
    assert "url(data:image/gif;base64,R0)" in out
    assert "url(#clip)" in out
    assert "url(../assets/x.png)" in out
    assert transport.calls == []


def test_rewrite_reference_drops_integrity_and_keeps_fragment(tmp_path):
    transport = FakeTransport().add(BASE + "/icons.svg", b"<svg/>", "image/svg+xml")
    store = make_store(tmp_path, transport)
    soup = bs4_parse(
        '<img src="/icons.svg#logo" integrity="sha384-x" crossorigin="anonymous">'
    )
    tag = soup.find("img")

    assert rewrite_reference(tag, "src", BASE + "/", store, AssetCategory.IMAGES, "../")
    assert tag["src"] == "../assets/icons.svg#logo"
    assert "integrity" not in tag.attrs
    assert "crossorigin" not in tag.attrs


def test_rewrite_reference_leaves_failures_untouched(tmp_path):
    store = make_store(tmp_path, FakeTransport())
    soup = bs4_parse('<script src="/app.js" integrity="sha384-x"></script>')
    tag = soup.find("script")

    assert not rewrite_reference(tag, "src", BASE + "/", store, AssetCategory.JS, "")
    assert tag["src"] == "/app.js"
    assert tag["integrity"] == "sha384-x"
