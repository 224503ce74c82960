"""
stanzajar：record-jar / stanza 文本格式的读写。

格式（E.S. Raymond,《The Art of Unix Programming》第 5 章）：

    ISO3166-2: AR-B
    Name:      Buenos Aires
    Category:  Province
    %%

- 每行一个 `key: value`；以空白开头的行是上一字段值的续行
- `%%` 行分隔记录；`#` 开头是注释；空行忽略
- 字段名大小写不敏感，内部空白折叠为 `-`
"""

from __future__ import annotations

import io
from typing import Any, Iterable, Mapping

from .codec.reader import Reader
from .codec.writer import Writer
from .config import StanzaOptions, load_options, options_from_mapping
from .domain.errors import (
    ConfigError,
    DuplicateFieldError,
    ParseError,
    StanzaError,
    StanzaIOError,
)
from .domain.record import Record, is_normalized_field_name, normalize_field_name


__all__ = [
    "ConfigError",
    "DuplicateFieldError",
    "ParseError",
    "Reader",
    "Record",
    "StanzaError",
    "StanzaIOError",
    "StanzaOptions",
    "Writer",
    "dumps",
    "is_normalized_field_name",
    "load_options",
    "loads",
    "normalize_field_name",
    "options_from_mapping",
]


def loads(text: str | bytes, *, options: StanzaOptions | None = None) -> list[Record]:
    return list(Reader(text, options=options))


def dumps(
    records: Iterable[Mapping[str, Any]],
    *,
    fields: Iterable[str] | None = None,
    force_empty: bool = False,
    options: StanzaOptions | None = None,
) -> str:
    buf = io.StringIO()
    w = Writer(buf, options=options)
    if fields is not None:
        w.set_output_fields(fields)
    if force_empty:
        w.force_empty = True
    for rec in records:
        w.write(rec)
    w.flush()
    return buf.getvalue()
