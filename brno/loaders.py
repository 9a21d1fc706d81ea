"""Loaders for `vokno` imports.

A loader is an async function from the path written in the script to the
source text found there. Failures are raised as ordinary exceptions; the
interpreter turns them into ImportError values.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional
from urllib.parse import urljoin

import httpx

from .capabilities import Loader


def is_url(path: str) -> bool:
    return path.startswith(('http://', 'https://'))


def file_loader(base_dir: Optional[str] = None) -> Loader:
    """Read imports from disk, resolving relative paths against `base_dir` (default: cwd)."""
    async def load(path: str) -> str:
        target = Path(path)
        if not target.is_absolute():
            target = Path(base_dir or os.getcwd()) / target
        with open(target, 'r', encoding='utf-8') as f:
            return f.read()
    return load


def http_loader(
    base_url: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = 5.0,
) -> Loader:
    """Fetch imports over HTTP, resolving relative paths against `base_url`.

    Pass `client` to reuse a connection pool (or to test with a mock
    transport); otherwise a short-lived client is opened per import.
    """
    async def fetch(http: httpx.AsyncClient, url: str) -> str:
        resp = await http.get(url)
        if not 200 <= resp.status_code < 300:
            preview = (resp.text or '')[:200]
            raise RuntimeError(f"HTTP {resp.status_code} for {url}: {preview}")
        return resp.text

    async def load(path: str) -> str:
        url = urljoin(base_url, path) if base_url else path
        if client is not None:
            return await fetch(client, url)
        async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as http:
            return await fetch(http, url)
    return load


def default_loader(base_dir: Optional[str] = None, client: Optional[httpx.AsyncClient] = None) -> Loader:
    """Send http(s) paths to the HTTP loader and everything else to disk."""
    from_disk = file_loader(base_dir)
    from_web = http_loader(client=client)

    async def load(path: str) -> str:
        if is_url(path):
            return await from_web(path)
        return await from_disk(path)
    return load
