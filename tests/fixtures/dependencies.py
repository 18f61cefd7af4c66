"""Recording stand-ins for the filesystem and network seams."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

import httpx

from snipweave.assembly import AssemblyDependencies
from snipweave.core.files import read_bytes, write_bytes


@dataclass
class FakeDependencies:
    """Serves remote documents from memory and records every call.

    Local reads and writes go to the real filesystem (tests run inside
    ``tmp_path``); only the network is faked.
    """

    remote: Dict[str, str] = field(default_factory=dict)
    fetches: List[str] = field(default_factory=list)
    writes: List[Path] = field(default_factory=list)

    def fetch(self, url: str) -> bytes:
        self.fetches.append(url)
        if url not in self.remote:
            request = httpx.Request("GET", url)
            response = httpx.Response(404, request=request)
            raise httpx.HTTPStatusError(
                "404 Not Found", request=request, response=response
            )
        return self.remote[url].encode("utf-8")

    def write(self, path: Path, data: bytes) -> None:
        self.writes.append(path)
        write_bytes(path, data)

    def build(self) -> AssemblyDependencies:
        return AssemblyDependencies(
            read=read_bytes,
            write=self.write,
            fetch=self.fetch,
        )
