#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
RefXSS — Reflected Parameter & Special-Character Scanner (v1.0)
License: MIT

FOR AUTHORIZED TESTING ONLY. Use on systems you own or are explicitly permitted to test.

Highlights
- Reads URLs from stdin (one per line), undoes tool/shell escaping (\\? \\= \\& \\/)
- Reflection discovery: raw, URL-encoded and "+"-for-space parameter values in HTML responses
- Special-character probing: one request per character, exact marker match only
- Fixed worker pool with a completion barrier; single-threaded aggregation
- Output: colored CLI + JSON/CSV

Dependencies
    pip install requests urllib3 colorama tqdm

Examples
    cat urls.txt | python RefXSS.py
    waybackurls target.tld | python RefXSS.py -c 80 -t 5 -H "Cookie: sid=abc123" -o results.json
    cat urls.txt | python RefXSS.py --proxy http://127.0.0.1:8080 --csv results.csv

"""

from __future__ import annotations
import argparse
import csv
import io
import json
import logging
import queue
import re
import sys
import threading
import time
import urllib.parse
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Tuple

import requests
import urllib3
from requests.adapters import HTTPAdapter
from colorama import Fore, Style, init as colorama_init
from tqdm import tqdm

# --------------------------------------------------------------------------------------
# Constants & Globals
# --------------------------------------------------------------------------------------
APP_NAME = "RefXSS"
APP_VERSION = "1.0"

USER_AGENT = "refxss/1.0"

DEFAULT_TIMEOUT = 10.0
DEFAULT_CONCURRENCY = 40

BODY_CHUNK_SIZE = 8192

# Bodies and query values are decoded the same way regardless of the declared charset
BODY_ENCODING = "utf-8"
BODY_ERRORS = "surrogateescape"

PROBE_PREFIX = "aprefix"
PROBE_SUFFIX = "asuffix"

# Order is also the output order
SPECIAL_CHARS = ['"', "'", "<", ">", "$", "|", "(", ")", "`", ":", ";", "{", "}"]

# Alternation order is the priority order: "\\?" must win over "\?"
ESCAPED_URL_RE = re.compile(r"\\\\\?|\\\?|\\=|\\&|\\/")

print_lock = threading.Lock()
logger = logging.getLogger(APP_NAME)

urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

# Sentinel passed through both queues
_STOP = object()

# --------------------------------------------------------------------------------------
# Utilities
# --------------------------------------------------------------------------------------

def banner() -> str:
    return f"""
{Fore.MAGENTA}
  ╔════════════════════════════════════════════════════════╗
  ║                   {APP_NAME} — v{APP_VERSION}                        ║
  ║          reflected params & unfiltered characters      ║
  ╚════════════════════════════════════════════════════════╝{Style.RESET_ALL}
"""


# Status lines go to stderr so stdout only carries the report
def _emit(color: str, msg: str):
    with print_lock:
        tqdm.write(color + msg + Style.RESET_ALL, file=sys.stderr)


def log_info(msg: str):
    _emit(Fore.CYAN, msg)


def log_ok(msg: str):
    _emit(Fore.GREEN, msg)


def log_warn(msg: str):
    _emit(Fore.YELLOW, msg)


def log_err(msg: str):
    _emit(Fore.RED, msg)


def setup_logging(log_file: Optional[str] = None, verbose: bool = False) -> List[logging.Handler]:
    # --log writes INFO (DEBUG with -v) to a file; -v also sends DEBUG to stderr
    handlers: List[logging.Handler] = []
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    if verbose:
        handlers.append(logging.StreamHandler(sys.stderr))
    if not handlers:
        return handlers

    fmt = logging.Formatter("%(asctime)s - %(message)s")
    for h in handlers:
        h.setFormatter(fmt)
        logger.addHandler(h)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False
    return handlers


def normalize_url(raw: str) -> str:
    """Undo the backslash escaping that recon tools and shells leave in URLs.

    ``\\\\?`` and ``\\?`` become ``?``, ``\\=`` becomes ``=``, ``\\&`` becomes ``&``
    and ``\\/`` becomes ``/``. Passes repeat until nothing changes, so the result is
    stable under a second call. Nothing else (percent-encoding, whitespace) is touched.
    """
    url = raw
    while True:
        cleaned = ESCAPED_URL_RE.sub(lambda m: m.group(0)[-1], url)
        if cleaned == url:
            return cleaned
        url = cleaned


def parse_headers(raw_headers: Iterable[str]) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for h in raw_headers:
        if ":" not in h:
            continue
        k, v = h.split(":", 1)
        if k.strip():
            out[k.strip()] = v.strip()
    return out


# --------------------------------------------------------------------------------------
# Configuration
# --------------------------------------------------------------------------------------

@dataclass(frozen=True)
class ScanConfig:
    timeout: float = DEFAULT_TIMEOUT
    concurrency: int = DEFAULT_CONCURRENCY
    headers: Tuple[str, ...] = ()
    proxy: Optional[str] = None
    user_agent: str = USER_AGENT

    def __post_init__(self):
        if self.concurrency < 1:
            raise ValueError(f"concurrency must be at least 1 (got {self.concurrency})")
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive (got {self.timeout})")


# --------------------------------------------------------------------------------------
# Networking
# --------------------------------------------------------------------------------------

def decode_body(raw: bytes) -> str:
    # undecodable bytes survive as lone surrogates, so matching stays byte-for-byte
    return raw.decode(BODY_ENCODING, BODY_ERRORS)


@dataclass(frozen=True)
class FetchResult:
    url: str
    status: int
    content_type: str
    body: str


class RequestExecutor:
    """Single-shot GET client shared by every worker.

    Certificates are not verified and nothing is retried: a failed request is
    reported as ``None`` and the caller treats it as a negative.
    """

    def __init__(self, config: ScanConfig):
        self.config = config
        self.session = requests.Session()
        self.session.verify = False

        adapter = HTTPAdapter(pool_connections=config.concurrency, pool_maxsize=config.concurrency)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

        self.session.headers["User-Agent"] = config.user_agent
        # Custom headers win over the defaults, User-Agent included
        self.session.headers.update(parse_headers(config.headers))

        if config.proxy:
            self.session.proxies.update({"http": config.proxy, "https": config.proxy})

    def get(self, url: str) -> Optional[FetchResult]:
        deadline = time.monotonic() + self.config.timeout
        try:
            r = self.session.get(url, timeout=self.config.timeout, verify=False, stream=True)
        except (requests.RequestException, ValueError) as e:
            logger.debug("[http] GET %s failed: %s", url, e)
            return None

        chunks: List[bytes] = []
        with r:
            try:
                for chunk in r.iter_content(chunk_size=BODY_CHUNK_SIZE):
                    chunks.append(chunk)
                    if time.monotonic() > deadline:
                        break
            except requests.RequestException as e:
                # never hand a truncated body to the matchers
                logger.debug("[http] reading body of %s failed: %s", url, e)
                chunks = []

        # the timeout bounds the whole request, not each socket read
        if time.monotonic() > deadline:
            logger.debug("[http] GET %s exceeded %ss", url, self.config.timeout)
            return None

        return FetchResult(
            url=r.url,
            status=r.status_code,
            content_type=r.headers.get("Content-Type", ""),
            body=decode_body(b"".join(chunks)),
        )


# --------------------------------------------------------------------------------------
# Heuristics & Analysis
# --------------------------------------------------------------------------------------

@dataclass(frozen=True)
class Finding:
    url: str
    param: str
    chars: Tuple[str, ...]


def is_html(content_type: str) -> bool:
    return "html" in (content_type or "").lower()


def query_pairs(url: str) -> List[Tuple[str, str]]:
    return urllib.parse.parse_qsl(urllib.parse.urlsplit(url).query, keep_blank_values=True,
                                  encoding=BODY_ENCODING, errors=BODY_ERRORS)


def first_values(pairs: Iterable[Tuple[str, str]]) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for k, v in pairs:
        out.setdefault(k, v)
    return out


def value_variants(value: str) -> Tuple[str, str, str]:
    encoded = urllib.parse.quote_plus(value, safe="", encoding=BODY_ENCODING, errors=BODY_ERRORS)
    return (value, encoded, value.replace(" ", "+"))


def find_reflected_params(executor, url: str) -> List[str]:
    """Names of the query parameters whose value shows up in the HTML body of ``url``.

    A value counts if it appears raw, URL-encoded, or with spaces as ``+``.
    Empty values are never reflected. Failures and non-HTML responses give ``[]``.
    """
    resp = executor.get(url)
    if resp is None:
        return []
    if not is_html(resp.content_type):
        logger.debug("[reflect] %s skipped, content type %r", url, resp.content_type)
        return []

    try:
        params = first_values(query_pairs(url))
    except ValueError as e:
        logger.debug("[reflect] %s unparsable: %s", url, e)
        return []

    reflected = []
    for name, value in params.items():
        if not value:
            continue
        if any(v in resp.body for v in value_variants(value)):
            reflected.append(name)
    return reflected


def append_payload(url: str, param: str, payload: str) -> str:
    # first value of param gets the payload appended, later duplicates are dropped
    parts = urllib.parse.urlsplit(url)
    query: List[Tuple[str, str]] = []
    seen = False
    for k, v in urllib.parse.parse_qsl(parts.query, keep_blank_values=True,
                                       encoding=BODY_ENCODING, errors=BODY_ERRORS):
        if k == param:
            if seen:
                continue
            seen = True
            v = v + payload
        query.append((k, v))
    if not seen:
        query.append((param, payload))
    return urllib.parse.urlunsplit(parts._replace(
        query=urllib.parse.urlencode(query, encoding=BODY_ENCODING, errors=BODY_ERRORS)))


def check_append(executor, url: str, param: str, payload: str) -> bool:
    try:
        target = append_payload(url, param, payload)
    except ValueError:
        return False
    resp = executor.get(target)
    return resp is not None and payload in resp.body


def probe_special_chars(executor, url: str, param: str) -> List[str]:
    # one request per character so each one is attributed on its own
    unfiltered = []
    for c in SPECIAL_CHARS:
        if check_append(executor, url, param, PROBE_PREFIX + c + PROBE_SUFFIX):
            unfiltered.append(c)
    return unfiltered


# --------------------------------------------------------------------------------------
# Reporting
# --------------------------------------------------------------------------------------

def _char_rank(c: str) -> int:
    return SPECIAL_CHARS.index(c) if c in SPECIAL_CHARS else len(SPECIAL_CHARS)


class Report:
    """url -> param -> unfiltered chars. Only the consuming thread touches it."""

    def __init__(self):
        self._grouped: Dict[str, Dict[str, Dict[str, None]]] = {}

    def add(self, f: Finding):
        if not f.chars:
            return
        chars = self._grouped.setdefault(f.url, {}).setdefault(f.param, {})
        for c in f.chars:
            chars[c] = None

    def __len__(self) -> int:
        return len(self._grouped)

    def finalize(self) -> Dict[str, Dict[str, Tuple[str, ...]]]:
        return {
            url: {p: tuple(sorted(chars, key=_char_rank)) for p, chars in params.items()}
            for url, params in self._grouped.items()
        }


def render_report(grouped: Dict[str, Dict[str, Tuple[str, ...]]], out=None):
    if out is None:
        out = sys.stdout
    if not grouped:
        print(f"{Fore.RED}[-] No reflected XSS parameters found{Style.RESET_ALL}", file=out)
        return
    for url, params in grouped.items():
        print(f"{Fore.GREEN}[REFLECTED]{Style.RESET_ALL} {url}", file=out)
        for param, chars in params.items():
            print(f"    {Fore.MAGENTA}Param:{Style.RESET_ALL} {param}", file=out)
            print(f"    Unfiltered: [{' '.join(chars)}]\n", file=out)


def write_json(grouped: Dict[str, Dict[str, Tuple[str, ...]]], path: str):
    data = {url: {p: list(chars) for p, chars in params.items()} for url, params in grouped.items()}
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    log_ok(f"[+] JSON saved → {path}")


def write_csv(grouped: Dict[str, Dict[str, Tuple[str, ...]]], path: str):
    with open(path, 'w', newline='', encoding='utf-8') as f:
        w = csv.DictWriter(f, fieldnames=["url", "param", "unfiltered"])
        w.writeheader()
        for url, params in grouped.items():
            for param, chars in params.items():
                w.writerow({"url": url, "param": param, "unfiltered": " ".join(chars)})
    log_ok(f"[+] CSV saved → {path}")


# --------------------------------------------------------------------------------------
# Orchestration
# --------------------------------------------------------------------------------------

class ScanPool:
    """Fixed pool of workers between an input feeder and a single result consumer.

    The feeder closes the input with one stop sentinel per worker; the results
    queue is closed only after every worker thread has been joined.
    """

    def __init__(self, executor, config: ScanConfig,
                 on_url_done: Optional[Callable[[str], None]] = None):
        self.executor = executor
        self.config = config
        self.on_url_done = on_url_done

    def scan_url(self, raw: str) -> List[Finding]:
        url = normalize_url(raw)
        findings = []
        for param in find_reflected_params(self.executor, url):
            chars = probe_special_chars(self.executor, url, param)
            logger.info("[probe] %s param=%s unfiltered=%s", url, param, "".join(chars) or "-")
            if chars:
                findings.append(Finding(url=url, param=param, chars=tuple(chars)))
        return findings

    def _feed(self, lines: Iterable[str], inbox: queue.Queue, failures: list):
        try:
            for line in lines:
                line = line.strip()
                if line:
                    inbox.put(line)
        except Exception as e:
            failures.append(e)
        finally:
            for _ in range(self.config.concurrency):
                inbox.put(_STOP)

    def _work(self, inbox: queue.Queue, results: queue.Queue):
        while True:
            raw = inbox.get()
            if raw is _STOP:
                return
            try:
                for f in self.scan_url(raw):
                    results.put(f)
            except Exception:
                logger.exception("[worker] scanning %s failed", raw)
            if self.on_url_done:
                self.on_url_done(raw)

    def _close(self, workers: List[threading.Thread], results: queue.Queue):
        for w in workers:
            w.join()
        results.put(_STOP)

    def run(self, lines: Iterable[str]) -> Dict[str, Dict[str, Tuple[str, ...]]]:
        n = self.config.concurrency
        inbox: queue.Queue = queue.Queue(maxsize=n * 2)
        results: queue.Queue = queue.Queue()
        failures: list = []

        feeder = threading.Thread(target=self._feed, args=(lines, inbox, failures),
                                  name="refxss-feeder", daemon=True)
        workers = [threading.Thread(target=self._work, args=(inbox, results),
                                    name=f"refxss-worker-{i}", daemon=True) for i in range(n)]
        closer = threading.Thread(target=self._close, args=(workers, results),
                                  name="refxss-closer", daemon=True)

        for t in workers:
            t.start()
        feeder.start()
        closer.start()

        report = Report()
        while True:
            f = results.get()
            if f is _STOP:
                break
            report.add(f)

        feeder.join()
        closer.join()
        if failures:
            raise failures[0]
        return report.finalize()


# --------------------------------------------------------------------------------------
# CLI
# --------------------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None):
    ap = argparse.ArgumentParser(
        description=f"{APP_NAME} (v{APP_VERSION}) — Reflected Parameter & Special-Character Scanner",
        epilog="URLs are read from stdin, one per line.",
    )
    ap.add_argument("-t", "--timeout", type=float, default=DEFAULT_TIMEOUT, help="Request timeout (seconds)")
    ap.add_argument("-c", "--concurrency", type=int, default=DEFAULT_CONCURRENCY, help="Concurrent workers")
    ap.add_argument("-H", "--header", action="append", help="Custom header 'Name: value' (repeatable)")
    ap.add_argument("--proxy", help="Proxy e.g. http://127.0.0.1:8080 or socks5h://127.0.0.1:9050")

    ap.add_argument("-o", "--output", help="Save findings to JSON file")
    ap.add_argument("--csv", help="Save findings to CSV file")
    ap.add_argument("--log", help="Log file path")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug diagnostics on stderr")
    ap.add_argument("-s", "--silent", action="store_true", help="No banner, no progress bar")
    ap.add_argument("--version", action="version", version=f"{APP_NAME} {APP_VERSION}")

    args = ap.parse_args(argv)

    try:
        config = ScanConfig(
            timeout=args.timeout,
            concurrency=args.concurrency,
            headers=tuple(args.header or []),
            proxy=args.proxy,
        )
    except ValueError as e:
        ap.error(str(e))

    colorama_init()

    if setup_logging(args.log, args.verbose):
        logger.info("Scanner started")

    if not args.silent:
        print(banner(), file=sys.stderr)

    executor = RequestExecutor(config)
    bar = tqdm(desc="Scan", unit="url", file=sys.stderr, disable=args.silent)
    pool = ScanPool(executor, config, on_url_done=lambda _u: bar.update(1))
    stdin = io.TextIOWrapper(sys.stdin.buffer, encoding="utf-8", errors="ignore")

    try:
        grouped = pool.run(stdin)
    except KeyboardInterrupt:
        log_warn("Interrupted by user")
        return
    except OSError as e:
        log_err(f"[-] Failed to read input: {e}")
        sys.exit(1)
    finally:
        bar.close()

    render_report(grouped)

    if args.output:
        write_json(grouped, args.output)
    if args.csv:
        write_csv(grouped, args.csv)


if __name__ == "__main__":
    main()
