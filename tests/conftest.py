import html
import urllib.parse

import pytest

from RefXSS import FetchResult


def query_value(url, name):
    for k, v in urllib.parse.parse_qsl(urllib.parse.urlsplit(url).query, keep_blank_values=True):
        if k == name:
            return v
    return ""


def html_page(url, text, content_type="text/html; charset=utf-8"):
    return FetchResult(url=url, status=200, content_type=content_type, body=f"<html><body>{text}</body></html>")


class FakeExecutor:
    """In-memory stand-in for RequestExecutor: ``handler(url)`` builds the response."""

    def __init__(self, handler):
        self.handler = handler
        self.calls = []

    def get(self, url):
        self.calls.append(url)
        return self.handler(url)


def echo_param(name, transform=lambda v: v, content_type="text/html; charset=utf-8"):
    def handler(url):
        return html_page(url, transform(query_value(url, name)), content_type)
    return handler


@pytest.fixture
def echo_executor():
    return FakeExecutor(echo_param("q"))


@pytest.fixture
def escaping_executor():
    return FakeExecutor(echo_param("q", html.escape))
