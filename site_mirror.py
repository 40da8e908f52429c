#!/usr/bin/env python3
import argparse
import json
import logging
import mimetypes
import os
import posixpath
import re
import shutil
import sys
import threading
import time
from collections import Counter, deque
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, as_completed, wait
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import (
    Callable,
    Deque,
    Dict,
    FrozenSet,
    List,
    Mapping,
    Optional,
    Set,
    Tuple,
    Union,
)
from urllib.parse import parse_qsl, quote, unquote, urldefrag, urljoin, urlsplit

import requests
from bs4 import BeautifulSoup
from dotenv import load_dotenv
from requests.adapters import HTTPAdapter
from requests.structures import CaseInsensitiveDict
from urllib3.util.retry import Retry

# -------------------- Config --------------------

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/124.0.0.0 Safari/537.36"
)

DEFAULT_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.7",
}

CSS_URL_RE = re.compile(r"url\(\s*([\"']?)([^)\"']+)\1\s*\)", re.IGNORECASE)
FONT_FACE_RE = re.compile(r"@font-face\s*\{[^}]*\}", re.IGNORECASE)
FONT_SRC_RE = re.compile(r"(\bsrc\s*:\s*)([^;}]+)", re.IGNORECASE)
CHARSET_RE = re.compile(r"charset\s*=\s*[\"']?([\w.:-]+)", re.IGNORECASE)
SRCSET_SPLIT_RE = re.compile(r"\s*,\s*")
WS_RE = re.compile(r"\s+")
UNSAFE_FILENAME_CHARS_RE = re.compile(r"[^A-Za-z0-9._-]")
STATS_FILE_RE = re.compile(r"^download-statistics-.*\.json$")

ASSETS_DIR = "assets"
FONTS_DIR = "assets/fonts"
HTML_LIKE_EXTS = {".html", ".htm", ".php", ".asp", ".aspx", ".jsp", ".jspx", ".cfm"}
STRIP_ON_REWRITE = ("integrity", "crossorigin", "referrerpolicy")

# -------------------- Settings --------------------


@dataclass(frozen=True)
class Settings:
    # durations in milliseconds, sizes in bytes
    max_retries: int = 3
    timeout_ms: int = 15000
    max_concurrency: int = 5
    max_file_size_bytes: int = 50 * 1024 * 1024
    delay_between_requests_ms: int = 100
    skip_large_files: bool = True
    user_agent: str = DEFAULT_USER_AGENT
    max_redirects: int = 5
    retry_backoff_ms: int = 1000
    report_dir: str = "."
    clean_output: bool = True

    @property
    def timeout(self) -> float:
        return self.timeout_ms / 1000.0

    @property
    def delay(self) -> float:
        return max(0, self.delay_between_requests_ms) / 1000.0


# -------------------- Errors --------------------


class MirrorError(Exception):
    pass


class ConfigError(MirrorError):
    pass


class TransportError(MirrorError):
    def __init__(self, url: str, message: str, retryable: bool = True):
        super().__init__(message)
        self.url = url
        self.retryable = retryable


class HTTPStatusError(TransportError):
    def __init__(self, url: str, status: int):
        super().__init__(
            url,
            f"HTTP {status}",
            retryable=status >= 500 or status in (408, 429),
        )
        self.status = status


class TooLargeError(MirrorError):
    def __init__(self, url: str, size: int, limit: int):
        super().__init__(f"{size} bytes exceeds the {limit} byte limit")
        self.url = url
        self.size = size
        self.limit = limit


class ParseError(MirrorError):
    pass


class FilesystemError(MirrorError):
    pass


# -------------------- Categories --------------------


class AssetCategory(str, Enum):
    PAGE = "page"
    CSS = "css"
    JS = "js"
    IMAGES = "images"
    FONTS = "fonts"
    VIDEOS = "videos"
    AUDIO = "audio"
    ICONS = "icons"
    OTHER = "other"


@dataclass(frozen=True)
class CategorySpec:
    subdir: str
    # empty means any extension is acceptable
    extensions: FrozenSet[str]
    default_ext: str


CATEGORY_TABLE: Dict[AssetCategory, CategorySpec] = {
    AssetCategory.PAGE: CategorySpec("", frozenset({"html", "htm"}), "html"),
    AssetCategory.CSS: CategorySpec(ASSETS_DIR, frozenset({"css"}), "css"),
    AssetCategory.JS: CategorySpec(ASSETS_DIR, frozenset({"js", "mjs"}), "js"),
    AssetCategory.IMAGES: CategorySpec(
        ASSETS_DIR,
        frozenset(
            {"png", "jpg", "jpeg", "gif", "webp", "svg", "ico", "bmp", "avif", "tif", "tiff"}
        ),
        "bin",
    ),
    AssetCategory.FONTS: CategorySpec(
        FONTS_DIR, frozenset({"woff", "woff2", "ttf", "otf", "eot"}), "woff"
    ),
    AssetCategory.VIDEOS: CategorySpec(
        ASSETS_DIR, frozenset({"mp4", "webm", "ogv", "mov", "m4v", "mkv"}), "bin"
    ),
    AssetCategory.AUDIO: CategorySpec(
        ASSETS_DIR,
        frozenset({"mp3", "ogg", "oga", "wav", "m4a", "aac", "flac", "opus"}),
        "bin",
    ),
    AssetCategory.ICONS: CategorySpec(
        ASSETS_DIR, frozenset({"ico", "png", "svg", "gif", "jpg", "jpeg", "webp"}), "bin"
    ),
    AssetCategory.OTHER: CategorySpec(ASSETS_DIR, frozenset(), "bin"),
}

CONTENT_TYPE_EXTS = {
    "text/css": "css",
    "application/javascript": "js",
    "application/x-javascript": "js",
    "text/javascript": "js",
    "application/json": "json",
    "application/manifest+json": "webmanifest",
    "text/html": "html",
    "image/svg+xml": "svg",
    "image/x-icon": "ico",
    "image/vnd.microsoft.icon": "ico",
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
    "image/avif": "avif",
    "font/woff": "woff",
    "font/woff2": "woff2",
    "font/ttf": "ttf",
    "font/otf": "otf",
    "application/font-woff": "woff",
    "application/font-woff2": "woff2",
    "application/x-font-ttf": "ttf",
    "application/x-font-otf": "otf",
    "application/vnd.ms-fontobject": "eot",
    "video/mp4": "mp4",
    "video/webm": "webm",
    "audio/mpeg": "mp3",
    "audio/ogg": "ogg",
}


@dataclass(frozen=True)
class HtmlRule:
    category: AssetCategory
    selector: str
    attr: Optional[str]
    kind: str = "attr"  # attr | srcset | link | style


# Order is the per-page processing order.
HTML_RULES: Tuple[HtmlRule, ...] = (
    HtmlRule(AssetCategory.CSS, 'link[rel~="stylesheet"][href]', "href"),
    HtmlRule(AssetCategory.CSS, "style", None, kind="style"),
    HtmlRule(AssetCategory.JS, "script[src]", "src"),
    HtmlRule(AssetCategory.IMAGES, "img[src]", "src"),
    HtmlRule(AssetCategory.IMAGES, 'input[type="image"][src]', "src"),
    HtmlRule(AssetCategory.IMAGES, "video[poster]", "poster"),
    HtmlRule(AssetCategory.IMAGES, "img[srcset]", "srcset", kind="srcset"),
    HtmlRule(AssetCategory.IMAGES, "picture source[srcset]", "srcset", kind="srcset"),
    HtmlRule(AssetCategory.PAGE, "a[href]", "href", kind="link"),
    HtmlRule(AssetCategory.VIDEOS, "video[src]", "src"),
    HtmlRule(AssetCategory.VIDEOS, "video source[src]", "src"),
    HtmlRule(AssetCategory.AUDIO, "audio[src]", "src"),
    HtmlRule(AssetCategory.AUDIO, "audio source[src]", "src"),
    HtmlRule(AssetCategory.FONTS, 'link[rel~="preload"][as="font"][href]', "href"),
    HtmlRule(AssetCategory.FONTS, 'link[type*="font"][href]', "href"),
    HtmlRule(AssetCategory.ICONS, 'link[rel~="icon"][href]', "href"),
    HtmlRule(AssetCategory.ICONS, 'link[rel~="apple-touch-icon"][href]', "href"),
    HtmlRule(AssetCategory.ICONS, 'link[rel~="mask-icon"][href]', "href"),
    HtmlRule(AssetCategory.OTHER, 'link[rel~="manifest"][href]', "href"),
    HtmlRule(AssetCategory.OTHER, "embed[src]", "src"),
    HtmlRule(AssetCategory.OTHER, "object[data]", "data"),
)


def url_extension(url: str) -> str:
    return posixpath.splitext(urlsplit(url).path)[1].lower().lstrip(".")


def ext_for_content_type(content_type: Optional[str]) -> Optional[str]:
    if not content_type:
        return None
    ct = content_type.split(";")[0].strip().lower()
    if ct in CONTENT_TYPE_EXTS:
        return CONTENT_TYPE_EXTS[ct]
    guess = mimetypes.guess_extension(ct)
    return guess.lstrip(".") if guess else None


def classify_url(url: str, content_type: Optional[str] = None) -> AssetCategory:
    # only categories the retry sweep can fetch: page, css, js, images, fonts, other
    ext = url_extension(url)
    ct = (content_type or "").split(";")[0].strip().lower()
    if ext and f".{ext}" not in HTML_LIKE_EXTS:
        for cat in (
            AssetCategory.CSS,
            AssetCategory.JS,
            AssetCategory.FONTS,
            AssetCategory.IMAGES,
        ):
            if ext in CATEGORY_TABLE[cat].extensions:
                return cat
    if ct:
        if ct == "text/css":
            return AssetCategory.CSS
        if "javascript" in ct:
            return AssetCategory.JS
        if ct.startswith("font/") or "font" in ct or "fontobject" in ct:
            return AssetCategory.FONTS
        if ct.startswith("image/"):
            return AssetCategory.IMAGES
        if "html" in ct:
            return AssetCategory.PAGE
        return AssetCategory.OTHER
    if not ext or f".{ext}" in HTML_LIKE_EXTS:
        return AssetCategory.PAGE
    return AssetCategory.OTHER


def looks_like_html(url: str, content_type: Optional[str]) -> bool:
    if content_type and "text/html" in content_type.lower():
        return True
    path = urlsplit(url).path
    return not posixpath.splitext(path)[1] and not path.endswith("/")


def is_stylesheet(category: AssetCategory, url: str, content_type: Optional[str]) -> bool:
    if category is AssetCategory.CSS:
        return True
    if content_type and "text/css" in content_type.lower():
        return True
    return url_extension(url) == "css"


# -------------------- Utils --------------------


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def iso_utc(dt: datetime) -> str:
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def sanitize_filename(name: str) -> str:
    name = UNSAFE_FILENAME_CHARS_RE.sub("_", name)
    if name.startswith("."):
        name = "_" + name[1:]
    return name[-200:]


def can_fetch_url(u: Optional[str]) -> bool:
    if not u:
        return False
    u = u.strip()
    if u.startswith(("#", "mailto:", "tel:", "javascript:", "data:", "blob:")):
        return False
    return True


def resolve_reference(base: str, value: str) -> Optional[Tuple[str, str]]:
    try:
        url, frag = urldefrag(urljoin(base, value.strip()))
        scheme = urlsplit(url).scheme.lower()
    except ValueError:
        logging.debug("unparseable reference %r on %s", value, base)
        return None
    if scheme not in ("http", "https"):
        return None
    return url, frag


def is_same_origin(base: str, other: str) -> bool:
    b, o = urlsplit(base), urlsplit(other)
    return (b.scheme.lower(), b.netloc.lower()) == (o.scheme.lower(), o.netloc.lower())


def ensure_parent_dir(p: Path) -> None:
    p.parent.mkdir(parents=True, exist_ok=True)


def root_prefix(local_file: str) -> str:
    # climbs from the directory holding local_file back to the mirror root
    return "../" * local_file.count("/")


def page_output_path(url: str) -> str:
    path = unquote(urlsplit(url).path)
    segs = [s for s in path.split("/") if s and s not in (".", "..")]
    if not segs or segs == ["index.html"]:
        return "index.html"
    if posixpath.splitext(segs[-1])[1]:
        return "/".join(segs)
    return "/".join(segs + ["index.html"])


def pause(settings: Settings) -> None:
    if settings.delay > 0:
        time.sleep(settings.delay)


# -------------------- HTML utils --------------------


def bs4_parse(markup: Union[str, bytes]) -> BeautifulSoup:
    try:
        return BeautifulSoup(markup, "lxml")
    except Exception:
        try:
            return BeautifulSoup(markup, "html.parser")
        except Exception as e:
            raise ParseError(f"unparseable HTML: {e}") from e


def effective_base_url(soup: BeautifulSoup, fallback: str) -> str:
    tag = soup.find("base", href=True)
    if tag and tag.get("href"):
        try:
            return urljoin(fallback, tag["href"])
        except ValueError:
            return fallback
    return fallback


def serialize_html(soup: BeautifulSoup) -> str:
    try:
        return soup.decode(formatter="html")
    except Exception:
        return str(soup)


# -------------------- Filename resolver --------------------


def fallback_filename(category: AssetCategory) -> str:
    stamp = utc_now().strftime("%Y%m%dT%H%M%S%f")
    return f"download-{stamp}.{CATEGORY_TABLE[category].default_ext}"


def derive_extension(url: str, spec: CategorySpec, content_type: Optional[str]) -> str:
    parts = urlsplit(url)
    # last path segment first, then query values such as ?file=a.woff2
    candidates = [posixpath.basename(parts.path)]
    candidates += [v for _, v in parse_qsl(parts.query)]
    for candidate in candidates:
        ext = posixpath.splitext(candidate.lower())[1].lstrip(".")
        if ext in spec.extensions:
            return ext
    ct_ext = ext_for_content_type(content_type)
    if ct_ext and (not spec.extensions or ct_ext in spec.extensions):
        return ct_ext
    return spec.default_ext


def build_filename(
    url: str, category: AssetCategory, content_type: Optional[str] = None
) -> str:
    spec = CATEGORY_TABLE[category]
    name = unquote(posixpath.basename(urlsplit(url).path))
    if not name.strip("."):
        if category in (AssetCategory.OTHER, AssetCategory.PAGE):
            return fallback_filename(category)
        name = category.value
    ext = posixpath.splitext(name)[1].lower().lstrip(".")
    if not ext or (spec.extensions and ext not in spec.extensions):
        name = f"{name}.{derive_extension(url, spec, content_type)}"
    return sanitize_filename(name)


class FilenameResolver:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._names: Dict[Tuple[str, str], str] = {}
        self._taken: Dict[str, Dict[str, str]] = {}

    def resolve(
        self, url: str, category: AssetCategory, content_type: Optional[str] = None
    ) -> str:
        subdir = CATEGORY_TABLE[category].subdir
        with self._lock:
            existing = self._names.get((subdir, url))
            if existing is not None:
                return existing
            try:
                name = build_filename(url, category, content_type)
            except Exception as e:
                logging.debug("filename fallback for %s: %s", url, e)
                name = fallback_filename(category)
            return self._claim(subdir, name, url)

    def _claim(self, subdir: str, name: str, url: str) -> str:
        # names compare case-insensitively for case-folding filesystems
        taken = self._taken.setdefault(subdir, {})
        stem, ext = posixpath.splitext(name)
        candidate = name
        n = 0
        while candidate.lower() in taken:
            n += 1
            candidate = f"{stem}-{n}{ext}"
        taken[candidate.lower()] = url
        self._names[(subdir, url)] = candidate
        return candidate


# -------------------- Crawl state --------------------


@dataclass
class PendingFetch:
    owner: int
    done: threading.Event = field(default_factory=threading.Event)


@dataclass
class CrawlState:
    visited: Set[str] = field(default_factory=set)
    asset_map: Dict[str, str] = field(default_factory=dict)
    pending: Dict[str, PendingFetch] = field(default_factory=dict)
    failed: Set[str] = field(default_factory=set)
    succeeded: Set[str] = field(default_factory=set)
    skipped: Set[str] = field(default_factory=set)
    html_assets: Set[str] = field(default_factory=set)
    local_paths: Set[str] = field(default_factory=set)
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def claim_page(self, key: str) -> bool:
        with self.lock:
            if key in self.visited:
                return False
            self.visited.add(key)
            return True

    def mark_succeeded(self, url: str) -> None:
        with self.lock:
            self.failed.discard(url)
            self.succeeded.add(url)

    def mark_failed(self, url: str) -> None:
        with self.lock:
            if url not in self.succeeded:
                self.failed.add(url)

    def mark_skipped(self, url: str) -> None:
        with self.lock:
            self.skipped.add(url)

    def take_failed(self) -> List[str]:
        with self.lock:
            urls = sorted(self.failed)
            self.failed.clear()
            return urls


@dataclass(frozen=True)
class PageTask:
    url: str
    intended_filename: str


# -------------------- Statistics --------------------


@dataclass(frozen=True)
class AssetRecord:
    url: str
    category: str
    outcome: str  # success | failed | skipped
    local_path: Optional[str] = None
    byte_size: int = 0
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, object]:
        data: Dict[str, object] = {"url": self.url, "type": self.category}
        if self.local_path is not None:
            data["local_path"] = self.local_path
            data["byte_size"] = self.byte_size
        if self.error is not None:
            data["error"] = self.error
        return data


def stats_filename(moment: datetime) -> str:
    stamp = iso_utc(moment).replace(":", "-").replace(".", "-")
    return f"download-statistics-{stamp}.json"


@dataclass
class RunReport:
    base_url: str
    start_time: datetime
    end_time: datetime
    successful: List[AssetRecord] = field(default_factory=list)
    failed: List[AssetRecord] = field(default_factory=list)
    skipped: List[AssetRecord] = field(default_factory=list)
    aborted: bool = False
    path: Optional[Path] = None

    @property
    def duration_ms(self) -> int:
        return int((self.end_time - self.start_time).total_seconds() * 1000)

    @property
    def total(self) -> int:
        return len(self.successful) + len(self.failed)

    @property
    def success_rate(self) -> float:
        if not self.total:
            return 0.0
        return len(self.successful) / self.total * 100.0

    @staticmethod
    def _breakdown(records: List[AssetRecord]) -> Dict[str, object]:
        pages = sum(1 for r in records if r.category == AssetCategory.PAGE.value)
        by_type = Counter(r.category for r in records if r.category != AssetCategory.PAGE.value)
        return {
            "total": len(records),
            "pages": pages,
            "assets": len(records) - pages,
            "by_type": dict(sorted(by_type.items())),
        }

    def to_dict(self) -> Dict[str, object]:
        return {
            "metadata": {
                "base_url": self.base_url,
                "start_time": iso_utc(self.start_time),
                "end_time": iso_utc(self.end_time),
                "duration_ms": self.duration_ms,
                "aborted": self.aborted,
            },
            "summary": {
                "total_downloads": self.total,
                "successful": len(self.successful),
                "failed": len(self.failed),
                "skipped": len(self.skipped),
                "success_rate": f"{self.success_rate:.2f}%",
            },
            "detailed": {
                "successful": self._breakdown(self.successful),
                "failed": self._breakdown(self.failed),
            },
            "urls": {
                "successful": [r.to_dict() for r in self.successful],
                "failed": [r.to_dict() for r in self.failed],
                "skipped": [r.to_dict() for r in self.skipped],
            },
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    def save(self, directory: Path) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / stats_filename(self.end_time)
        path.write_text(self.to_json(), encoding="utf-8")
        self.path = path
        return path


class StatsRecorder:
    """Collects the terminal outcome of every page and asset.

    Records are keyed by URL, so a URL has at most one entry. A failure that
    is later retried successfully is moved to the successful list; a success
    is never downgraded.
    """

    def __init__(self, base_url: str):
        self.base_url = base_url
        self.start_time: Optional[datetime] = None
        self._lock = threading.Lock()
        self._successful: Dict[str, AssetRecord] = {}
        self._failed: Dict[str, AssetRecord] = {}
        self._skipped: Dict[str, AssetRecord] = {}
        self.counts: Dict[str, Counter] = {"successful": Counter(), "failed": Counter()}

    def start(self) -> None:
        self.start_time = utc_now()

    def record_success(
        self, url: str, category: str, local_path: str, byte_size: int
    ) -> None:
        rec = AssetRecord(url, category, "success", local_path, byte_size)
        with self._lock:
            prev = self._failed.pop(url, None)
            if prev is not None:
                self.counts["failed"][prev.category] -= 1
            if url not in self._successful:
                self.counts["successful"][category] += 1
            self._successful[url] = rec

    def record_failure(self, url: str, category: str, error: str) -> None:
        with self._lock:
            if url in self._successful:
                return
            prev = self._failed.get(url)
            if prev is not None:
                self.counts["failed"][prev.category] -= 1
            self._failed[url] = AssetRecord(url, category, "failed", error=error)
            self.counts["failed"][category] += 1

    def record_skip(self, url: str, category: str, reason: str) -> None:
        with self._lock:
            self._skipped[url] = AssetRecord(url, category, "skipped", error=reason)

    def failure_for(self, url: str) -> Optional[AssetRecord]:
        with self._lock:
            return self._failed.get(url)

    def finish(self, aborted: bool = False) -> RunReport:
        with self._lock:
            return RunReport(
                base_url=self.base_url,
                start_time=self.start_time or utc_now(),
                end_time=utc_now(),
                successful=list(self._successful.values()),
                failed=list(self._failed.values()),
                skipped=list(self._skipped.values()),
                aborted=aborted,
            )


# -------------------- HTTP --------------------


@dataclass
class FetchResult:
    url: str
    status: int
    headers: Mapping[str, str]
    body: bytes
    final_url: Optional[str] = None

    def __post_init__(self) -> None:
        self.headers = CaseInsensitiveDict(self.headers or {})

    @property
    def content_type(self) -> Optional[str]:
        return self.headers.get("Content-Type")

    @property
    def declared_size(self) -> Optional[int]:
        try:
            return int(self.headers.get("Content-Length", ""))
        except ValueError:
            return None

    @property
    def text(self) -> str:
        m = CHARSET_RE.search(self.content_type or "")
        try:
            return self.body.decode(m.group(1) if m else "utf-8", errors="replace")
        except LookupError:
            return self.body.decode("utf-8", errors="replace")


def build_session(settings: Settings) -> requests.Session:
    s = requests.Session()
    # throttling statuses are retried here, honouring Retry-After; network
    # errors and other statuses go through fetch_with_retries
    retry = Retry(
        total=2,
        connect=0,
        read=0,
        backoff_factor=0.5,
        status_forcelist=[429, 503],
        allowed_methods={"GET", "HEAD"},
        raise_on_status=False,
        respect_retry_after_header=True,
    )
    pool = max(10, settings.max_concurrency * 2)
    adapter = HTTPAdapter(max_retries=retry, pool_connections=pool, pool_maxsize=pool)
    s.mount("http://", adapter)
    s.mount("https://", adapter)
    s.headers.update(DEFAULT_HEADERS)
    s.headers["User-Agent"] = settings.user_agent
    s.max_redirects = settings.max_redirects
    return s


def check_size(url: str, size: Optional[int], settings: Settings) -> None:
    if settings.skip_large_files and size is not None and size > settings.max_file_size_bytes:
        raise TooLargeError(url, size, settings.max_file_size_bytes)


class HttpTransport:
    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        self.settings = settings
        self.session = session if session is not None else build_session(settings)

    def get(self, url: str) -> FetchResult:
        try:
            with self.session.get(url, timeout=self.settings.timeout, stream=True) as resp:
                if resp.status_code >= 400:
                    raise HTTPStatusError(url, resp.status_code)
                declared = resp.headers.get("Content-Length")
                if declared and declared.isdigit():
                    check_size(url, int(declared), self.settings)
                chunks: List[bytes] = []
                written = 0
                for chunk in resp.iter_content(chunk_size=64 * 1024):
                    if not chunk:
                        continue
                    written += len(chunk)
                    check_size(url, written, self.settings)
                    chunks.append(chunk)
                return FetchResult(
                    url=url,
                    status=resp.status_code,
                    headers=resp.headers,
                    body=b"".join(chunks),
                    final_url=resp.url or url,
                )
        except requests.TooManyRedirects as e:
            raise TransportError(url, f"too many redirects: {e}", retryable=False) from e
        except requests.Timeout as e:
            raise TransportError(url, f"timeout: {e}") from e
        except requests.RequestException as e:
            raise TransportError(url, f"request failed: {e}") from e

    def close(self) -> None:
        self.session.close()


def fetch_with_retries(transport, url: str, settings: Settings) -> FetchResult:
    attempts = max(1, settings.max_retries)
    attempt = 1
    while True:
        try:
            return transport.get(url)
        except TransportError as e:
            if not e.retryable or attempt >= attempts:
                raise
            logging.info("retry %d/%d for %s (%s)", attempt, attempts - 1, url, e)
            time.sleep(attempt * settings.retry_backoff_ms / 1000.0)
            attempt += 1


# -------------------- Asset store --------------------


class AssetStore:
    def __init__(
        self,
        output_dir: Path,
        state: CrawlState,
        stats: StatsRecorder,
        transport,
        settings: Settings,
        resolver: Optional[FilenameResolver] = None,
        page_sink: Optional[Callable[[str, FetchResult], None]] = None,
    ):
        self.output_dir = Path(output_dir)
        self.state = state
        self.stats = stats
        self.transport = transport
        self.settings = settings
        self.resolver = resolver or FilenameResolver()
        self.page_sink = page_sink

    def local_path(self, url: str) -> Optional[str]:
        with self.state.lock:
            return self.state.asset_map.get(url)

    def is_own_reference(self, value: str, prefix: str) -> bool:
        # only paths written by this run count as local
        path = value.strip().split("#", 1)[0]
        if not path.startswith(prefix):
            return False
        with self.state.lock:
            return path[len(prefix):] in self.state.local_paths

    def fetch_and_store(self, url: str, category: AssetCategory) -> Optional[str]:
        """Mirror-relative path of the stored copy of ``url``, or None.

        Each URL is fetched at most once: later callers get the mapped path,
        or block until the in-flight fetch for it finishes. Failures never
        escape; they are recorded and reported as None.
        """
        url = urldefrag(url)[0]
        pending, owner = self._claim(url)
        if not owner:
            if pending is None:
                return self.local_path(url)
            if pending.owner == threading.get_ident():
                logging.debug("reference cycle through %s", url)
                return None
            pending.done.wait()
            return self.local_path(url)

        html_result: Optional[FetchResult] = None
        try:
            local, html_result = self._download(url, category)
        finally:
            with self.state.lock:
                self.state.pending.pop(url, None)
            pending.done.set()

        if html_result is not None and self.page_sink is not None:
            self.page_sink(url, html_result)
        return local

    def _claim(self, url: str) -> Tuple[Optional[PendingFetch], bool]:
        st = self.state
        with st.lock:
            if (
                url in st.asset_map
                or url in st.failed
                or url in st.skipped
                or url in st.html_assets
            ):
                return None, False
            existing = st.pending.get(url)
            if existing is not None:
                return existing, False
            pending = PendingFetch(owner=threading.get_ident())
            st.pending[url] = pending
            return pending, True

    def _download(
        self, url: str, category: AssetCategory
    ) -> Tuple[Optional[str], Optional[FetchResult]]:
        logging.info("downloading %s: %s", category.value, url)
        try:
            result = fetch_with_retries(self.transport, url, self.settings)
            check_size(url, result.declared_size, self.settings)
        except TooLargeError as e:
            logging.warning("skip large file %s (%s)", url, e)
            self.state.mark_skipped(url)
            self.stats.record_skip(url, category.value, str(e))
            return None, None
        except MirrorError as e:
            self._fail(url, category, e)
            return None, None

        if category is AssetCategory.OTHER and looks_like_html(url, result.content_type):
            logging.info("detected HTML page behind asset reference: %s", url)
            with self.state.lock:
                self.state.html_assets.add(url)
            return None, result

        try:
            local = self._write(url, category, result)
            if is_stylesheet(category, url, result.content_type):
                self._rewrite_stylesheet(url, local, result)
        except FilesystemError as e:
            self._fail(url, category, e)
            return None, None

        with self.state.lock:
            self.state.asset_map[url] = local
            self.state.local_paths.add(local)
        self.state.mark_succeeded(url)
        self.stats.record_success(url, category.value, local, len(result.body))
        pause(self.settings)
        return local, None

    def _write(self, url: str, category: AssetCategory, result: FetchResult) -> str:
        name = self.resolver.resolve(url, category, result.content_type)
        local = f"{CATEGORY_TABLE[category].subdir}/{name}"
        target = self.output_dir / local
        try:
            ensure_parent_dir(target)
            target.write_bytes(result.body)
        except OSError as e:
            raise FilesystemError(f"cannot write {target}: {e}") from e
        logging.info("downloaded asset: %s -> %s", url, local)
        return local

    def _rewrite_stylesheet(self, url: str, local: str, result: FetchResult) -> None:
        text = result.text
        new_text = rewrite_stylesheet(
            text, result.final_url or url, self, root_prefix(local)
        )
        if new_text == text:
            return
        try:
            (self.output_dir / local).write_text(new_text, encoding="utf-8")
        except OSError as e:
            raise FilesystemError(f"cannot rewrite {local}: {e}") from e
        logging.debug("rewrote stylesheet %s", local)

    def _fail(self, url: str, category: AssetCategory, error: Exception) -> None:
        logging.warning("failed %s %s: %s", category.value, url, error)
        self.state.mark_failed(url)
        self.stats.record_failure(url, category.value, str(error))


# -------------------- Rewriters --------------------


def _css_reference(quote_char: str, value: str) -> str:
    return f"url({quote_char}{value}{quote_char})"


def rewrite_font_faces(
    css_text: str, css_base_url: str, store: AssetStore, prefix: str
) -> str:
    def fix_url(m: re.Match) -> str:
        q = m.group(1) or ""
        u = m.group(2).strip()
        if not can_fetch_url(u) or store.is_own_reference(u, prefix):
            return m.group(0)
        resolved = resolve_reference(css_base_url, u)
        if resolved is None:
            return m.group(0)
        font_url, frag = resolved
        local = store.fetch_and_store(font_url, AssetCategory.FONTS)
        if local is None:
            return m.group(0)
        return _css_reference(q, prefix + local + (f"#{frag}" if frag else ""))

    def fix_src(m: re.Match) -> str:
        return m.group(1) + CSS_URL_RE.sub(fix_url, m.group(2))

    def fix_block(m: re.Match) -> str:
        return FONT_SRC_RE.sub(fix_src, m.group(0))

    return FONT_FACE_RE.sub(fix_block, css_text)


def rewrite_css_urls(
    css_text: str, css_base_url: str, store: AssetStore, prefix: str
) -> str:
    # only rewrites what is already stored, never downloads
    def repl(m: re.Match) -> str:
        q = m.group(1) or ""
        u = m.group(2).strip()
        if not can_fetch_url(u) or store.is_own_reference(u, prefix):
            return m.group(0)
        resolved = resolve_reference(css_base_url, u)
        if resolved is None:
            return m.group(0)
        local = store.local_path(resolved[0])
        if local is None:
            return m.group(0)
        frag = f"#{resolved[1]}" if resolved[1] else ""
        return _css_reference(q, prefix + local + frag)

    return CSS_URL_RE.sub(repl, css_text)


def rewrite_stylesheet(
    css_text: str, css_base_url: str, store: AssetStore, prefix: str
) -> str:
    text = rewrite_font_faces(css_text, css_base_url, store, prefix)
    return rewrite_css_urls(text, css_base_url, store, prefix)


def rewrite_reference(
    tag,
    attr: str,
    base: str,
    store: AssetStore,
    category: AssetCategory,
    prefix: str,
) -> bool:
    val = tag.get(attr)
    if not isinstance(val, str) or not can_fetch_url(val):
        return False
    if store.is_own_reference(val, prefix):
        return False
    resolved = resolve_reference(base, val)
    if resolved is None:
        return False
    url, frag = resolved
    local = store.fetch_and_store(url, category)
    if local is None:
        return False
    tag[attr] = prefix + local + (f"#{frag}" if frag else "")
    for rm in STRIP_ON_REWRITE:
        if rm in tag.attrs:
            del tag.attrs[rm]
    return True


def rewrite_srcset_value(
    srcset: str, base: str, store: AssetStore, prefix: str
) -> str:
    parts = []
    for candidate in SRCSET_SPLIT_RE.split(srcset.strip()):
        if not candidate:
            continue
        comp = WS_RE.split(candidate.strip())
        url_part = comp[0]
        desc = " ".join(comp[1:])
        local = None
        if can_fetch_url(url_part) and not store.is_own_reference(url_part, prefix):
            resolved = resolve_reference(base, url_part)
            if resolved is not None:
                local = store.fetch_and_store(resolved[0], AssetCategory.IMAGES)
        if local is None:
            parts.append(candidate)
        else:
            parts.append(f"{prefix}{local} {desc}".strip())
    return ", ".join(parts)


def rewrite_inline_css_in_html(
    soup: BeautifulSoup, base: str, store: AssetStore, prefix: str
) -> None:
    for tag in soup.select("[style]"):
        css = tag.get("style")
        if not css:
            continue
        new_css = rewrite_css_urls(css, base, store, prefix)
        if new_css != css:
            tag["style"] = new_css
    for style in soup.find_all("style"):
        if style.string:
            new_text = rewrite_css_urls(style.string, base, store, prefix)
            if new_text != style.string:
                style.string.replace_with(new_text)


# -------------------- Crawl engine --------------------


def is_html_response(result: FetchResult) -> bool:
    ct = (result.content_type or "").lower()
    if ct:
        return "html" in ct
    return result.body.lstrip()[:1] == b"<"


class CrawlEngine:
    def __init__(
        self,
        base_url: str,
        output_dir: Path,
        settings: Settings,
        transport,
        stats: StatsRecorder,
        state: Optional[CrawlState] = None,
    ):
        self.base_url = base_url
        self.output_dir = Path(output_dir)
        self.settings = settings
        self.transport = transport
        self.stats = stats
        self.state = state or CrawlState()
        self.store = AssetStore(
            self.output_dir,
            self.state,
            stats,
            transport,
            settings,
            page_sink=self.adopt_html_asset,
        )
        parsed = urlsplit(base_url)
        base_path = parsed.path
        if posixpath.splitext(base_path)[1]:
            base_path = posixpath.dirname(base_path)
        self._base_path = base_path.rstrip("/")
        self._frontier: Deque[PageTask] = deque()
        self._frontier_lock = threading.Lock()

    # ---- scheduling ----

    def in_scope(self, url: str) -> bool:
        if not is_same_origin(self.base_url, url):
            return False
        if not self._base_path:
            return True
        path = urlsplit(url).path or "/"
        return path == self._base_path or path.startswith(self._base_path + "/")

    def schedule(self, url: str, force: bool = False) -> str:
        target = page_output_path(url)
        if force or self.state.claim_page(target):
            with self._frontier_lock:
                self._frontier.append(PageTask(url, target))
        return target

    def _next_task(self) -> Optional[PageTask]:
        with self._frontier_lock:
            return self._frontier.popleft() if self._frontier else None

    def crawl(self) -> None:
        limit = max(1, self.settings.max_concurrency)
        pool = ThreadPoolExecutor(max_workers=limit, thread_name_prefix="mirror")
        in_flight: Set[Future] = set()
        try:
            while True:
                while len(in_flight) < limit:
                    task = self._next_task()
                    if task is None:
                        break
                    in_flight.add(pool.submit(self.run_page, task))
                if not in_flight:
                    break
                done, in_flight = wait(in_flight, return_when=FIRST_COMPLETED)
                for fut in done:
                    fut.result()
        except BaseException:
            pool.shutdown(wait=False, cancel_futures=True)
            raise
        pool.shutdown(wait=True)

    # ---- page pipeline ----

    def adopt_html_asset(self, url: str, result: FetchResult) -> None:
        if not self.in_scope(url):
            logging.info("not mirroring out-of-scope page %s", url)
            self.stats.record_skip(url, AssetCategory.PAGE.value, "HTML page outside the mirror scope")
            return
        target = page_output_path(url)
        if self.state.claim_page(target):
            self.run_page(PageTask(url, target), prefetched=result)

    def run_page(self, task: PageTask, prefetched: Optional[FetchResult] = None) -> None:
        url = task.url
        logging.info("fetching page: %s", url)
        try:
            result = prefetched or fetch_with_retries(self.transport, url, self.settings)
            check_size(url, result.declared_size, self.settings)
            category = self._save_page(task, result)
        except TooLargeError as e:
            logging.warning("skip large page %s (%s)", url, e)
            self.state.mark_skipped(url)
            self.stats.record_skip(url, AssetCategory.PAGE.value, str(e))
            return
        except MirrorError as e:
            self._page_failed(url, e)
            return
        except Exception as e:
            logging.exception("unexpected error while mirroring %s", url)
            self._page_failed(url, e)
            return
        self.state.mark_succeeded(url)
        self.stats.record_success(
            url, category.value, task.intended_filename, len(result.body)
        )
        logging.info("saved page: %s -> %s", url, task.intended_filename)
        pause(self.settings)

    def _page_failed(self, url: str, error: Exception) -> None:
        logging.warning("failed page %s: %s", url, error)
        self.state.mark_failed(url)
        self.stats.record_failure(url, AssetCategory.PAGE.value, str(error))

    def _save_page(self, task: PageTask, result: FetchResult) -> AssetCategory:
        target = self.output_dir / task.intended_filename
        if not is_html_response(result):
            self._write(target, result.body)
            return AssetCategory.OTHER

        soup = bs4_parse(result.body)
        base = effective_base_url(soup, result.final_url or task.url)
        # relocated references are relative to the saved file, not <base>
        for tag in soup.find_all("base"):
            tag.decompose()
        self.process_document(soup, base, task.intended_filename)
        self._write(target, serialize_html(soup).encode("utf-8"))
        return AssetCategory.PAGE

    @staticmethod
    def _write(target: Path, data: bytes) -> None:
        try:
            ensure_parent_dir(target)
            target.write_bytes(data)
        except OSError as e:
            raise FilesystemError(f"cannot write {target}: {e}") from e

    def process_document(self, soup: BeautifulSoup, base: str, local_file: str) -> None:
        prefix = root_prefix(local_file)
        page_dir = posixpath.dirname(local_file)
        for rule in HTML_RULES:
            for tag in soup.select(rule.selector):
                if rule.kind == "link":
                    self._rewrite_link(tag, base, page_dir)
                elif rule.kind == "style":
                    if tag.string:
                        new_text = rewrite_font_faces(tag.string, base, self.store, prefix)
                        if new_text != tag.string:
                            tag.string.replace_with(new_text)
                elif rule.kind == "srcset":
                    val = tag.get(rule.attr)
                    if val:
                        tag[rule.attr] = rewrite_srcset_value(val, base, self.store, prefix)
                else:
                    rewrite_reference(tag, rule.attr, base, self.store, rule.category, prefix)
        rewrite_inline_css_in_html(soup, base, self.store, prefix)

    def _rewrite_link(self, tag, base: str, page_dir: str) -> None:
        href = tag.get("href")
        if not can_fetch_url(href):
            return
        resolved = resolve_reference(base, href)
        if resolved is None:
            return
        url, frag = resolved
        if not self.in_scope(url):
            return
        target = self.schedule(url)
        rel = posixpath.relpath(target, page_dir or ".")
        tag["href"] = quote(rel) + (f"#{frag}" if frag else "")


# -------------------- Retry sweep --------------------


class RetryCoordinator:
    def __init__(self, engine: CrawlEngine):
        self.engine = engine

    def classify(self, url: str) -> AssetCategory:
        category = classify_url(url)
        record = self.engine.stats.failure_for(url)
        recorded = AssetCategory(record.category) if record is not None else None
        if recorded is None:
            return category
        if recorded is AssetCategory.PAGE:
            return recorded if self.engine.in_scope(url) else category
        if category in (AssetCategory.PAGE, AssetCategory.OTHER):
            return recorded
        return category

    def sweep(self) -> int:
        urls = self.engine.state.take_failed()
        if not urls:
            return 0
        logging.info("retrying %d failed download(s)", len(urls))
        assets: List[Tuple[str, AssetCategory]] = []
        for url in urls:
            category = self.classify(url)
            if category is AssetCategory.PAGE:
                self.engine.schedule(url, force=True)
            else:
                assets.append((url, category))

        if assets:
            limit = max(1, self.engine.settings.max_concurrency)
            with ThreadPoolExecutor(max_workers=limit, thread_name_prefix="retry") as pool:
                futures = [
                    pool.submit(self.engine.store.fetch_and_store, u, c) for u, c in assets
                ]
                for fut in as_completed(futures):
                    fut.result()
        self.engine.crawl()
        return len(urls)


# -------------------- Mirror --------------------


def validate_base_url(base_url: Optional[str]) -> str:
    if not base_url or not base_url.strip():
        raise ConfigError("a base URL is required (argument or BASE_URL)")
    base_url = base_url.strip()
    if urlsplit(base_url).scheme.lower() not in ("http", "https") or not urlsplit(base_url).netloc:
        raise ConfigError(f"invalid base URL {base_url!r}, use http:// or https://")
    return base_url


def prepare_output_dir(output_dir: Path, clean: bool = True) -> None:
    try:
        if clean and output_dir.exists():
            for item in output_dir.iterdir():
                if item.is_file() and STATS_FILE_RE.match(item.name):
                    logging.info("keeping statistics file: %s", item.name)
                    continue
                if item.is_dir() and not item.is_symlink():
                    shutil.rmtree(item)
                else:
                    item.unlink()
            logging.info("cleaned output directory: %s", output_dir)
        (output_dir / FONTS_DIR).mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FilesystemError(f"cannot prepare {output_dir}: {e}") from e


def write_report(report: RunReport, settings: Settings) -> Path:
    path = report.save(Path(settings.report_dir))
    logging.info("statistics saved: %s", path)
    return path


def log_summary(report: RunReport) -> None:
    logging.info(
        "download summary: %d succeeded, %d failed, %d skipped (%.2f%%)",
        len(report.successful),
        len(report.failed),
        len(report.skipped),
        report.success_rate,
    )
    for rec in report.failed:
        logging.info("failed: %s (%s)", rec.url, rec.error)


def mirror(
    base_url: str,
    output_dir: Union[str, Path],
    settings: Optional[Settings] = None,
    *,
    transport=None,
) -> RunReport:
    base_url = validate_base_url(base_url)
    settings = settings or Settings()
    out = Path(output_dir)
    prepare_output_dir(out, clean=settings.clean_output)

    owns_transport = transport is None
    if transport is None:
        transport = HttpTransport(settings)
    stats = StatsRecorder(base_url)
    stats.start()
    engine = CrawlEngine(base_url, out, settings, transport, stats)
    logging.info("mirroring %s into %s", base_url, out)
    try:
        engine.schedule(base_url)
        engine.crawl()
        RetryCoordinator(engine).sweep()
    except KeyboardInterrupt:
        logging.warning("interrupted, saving statistics for the partial mirror")
        write_report(stats.finish(aborted=True), settings)
        raise
    finally:
        if owns_transport:
            transport.close()

    report = stats.finish()
    write_report(report, settings)
    log_summary(report)
    return report


# -------------------- Config loader --------------------


def load_config_file(path: str) -> Dict[str, object]:
    p = Path(path)
    suf = p.suffix.lower()
    if suf in {".toml", ".tml"}:
        try:
            import tomllib  # py311+
        except ImportError:
            import tomli as tomllib  # backport
        try:
            with open(p, "rb") as f:
                return tomllib.load(f) or {}
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigError(f"cannot read {p}: {e}") from e
    elif suf in {".yaml", ".yml"}:
        try:
            import yaml
        except ImportError:
            raise ConfigError("YAML config requires 'PyYAML' (pip install site-mirror[yaml])")
        try:
            with open(p, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"cannot read {p}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError("top-level YAML must be a mapping")
        return data
    else:
        raise ConfigError("unsupported config format, use .toml or .yaml")


# -------------------- CLI --------------------


def build_arg_parser() -> argparse.ArgumentParser:
    defaults = Settings()
    p = argparse.ArgumentParser(
        description="Mirror a website into a self-contained offline copy.",
    )
    p.add_argument("url", nargs="?", default=None, help="start URL (default: $BASE_URL)")
    p.add_argument("-o", "--output", default="public", help="mirror directory")
    p.add_argument("--config", type=str, default=None, help="path to config.toml|.yaml")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    p.add_argument(
        "--max-retries",
        type=int,
        default=defaults.max_retries,
        help="attempts per request before it counts as failed",
    )
    p.add_argument(
        "--timeout-ms", type=int, default=defaults.timeout_ms, help="per-request timeout"
    )
    p.add_argument(
        "--concurrency",
        dest="max_concurrency",
        type=int,
        default=defaults.max_concurrency,
        help="pages processed in parallel",
    )
    p.add_argument(
        "--max-file-size",
        dest="max_file_size_bytes",
        type=int,
        default=defaults.max_file_size_bytes,
        help="size ceiling in bytes",
    )
    p.add_argument(
        "--delay-ms",
        dest="delay_between_requests_ms",
        type=int,
        default=defaults.delay_between_requests_ms,
        help="pause after every stored page or asset",
    )
    p.add_argument(
        "--no-skip-large-files",
        dest="skip_large_files",
        action="store_false",
        help="download files above the size ceiling anyway",
    )
    p.add_argument("--user-agent", default=defaults.user_agent, help="User-Agent header")
    p.add_argument("--max-redirects", type=int, default=defaults.max_redirects)
    p.add_argument(
        "--retry-backoff-ms",
        type=int,
        default=defaults.retry_backoff_ms,
        help="linear backoff unit between attempts",
    )
    p.add_argument(
        "--report-dir",
        default=defaults.report_dir,
        help="where the statistics JSON is written",
    )
    p.add_argument(
        "--no-clean",
        dest="clean_output",
        action="store_false",
        help="keep existing files in the mirror directory",
    )
    return p


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = build_arg_parser()
    preliminary, _ = parser.parse_known_args(argv)
    if preliminary.config:
        cfg = load_config_file(preliminary.config)
        flat = dict(cfg)
        for g in ("general", "crawl", "retry", "report"):
            if isinstance(cfg.get(g), dict):
                flat.update(cfg[g])
        parser.set_defaults(**flat)
    return parser.parse_args(argv)


def settings_from_args(args: argparse.Namespace) -> Settings:
    return Settings(
        max_retries=max(1, args.max_retries),
        timeout_ms=max(1, args.timeout_ms),
        max_concurrency=max(1, args.max_concurrency),
        max_file_size_bytes=max(1024, args.max_file_size_bytes),
        delay_between_requests_ms=max(0, args.delay_between_requests_ms),
        skip_large_files=bool(args.skip_large_files),
        user_agent=args.user_agent,
        max_redirects=max(0, args.max_redirects),
        retry_backoff_ms=max(0, args.retry_backoff_ms),
        report_dir=str(args.report_dir),
        clean_output=bool(args.clean_output),
    )


def main(argv: Optional[List[str]] = None) -> None:
    load_dotenv()
    try:
        args = parse_args(argv)
        base_url = validate_base_url(args.url or os.getenv("BASE_URL"))
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("Usage: site-mirror <URL>  (or set BASE_URL)", file=sys.stderr)
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )
    settings = settings_from_args(args)

    print("Reminder: only mirror content you own or have permission to copy.")
    try:
        report = mirror(base_url, args.output, settings)
    except MirrorError as e:
        logging.error("mirror failed: %s", e)
        sys.exit(1)

    print("\n=== Download Summary ===")
    print(f"Successfully downloaded: {len(report.successful)} items")
    print(f"Failed downloads: {len(report.failed)}")
    if report.skipped:
        print(f"Skipped (too large): {len(report.skipped)}")
    print(f"Mirror saved in: {Path(args.output).resolve()}")
    if report.path is not None:
        print(f"Statistics: {report.path}")
    if report.failed:
        print("\nFailed URLs:")
        for rec in report.failed:
            print(f"- {rec.url}")


if __name__ == "__main__":
    main()
