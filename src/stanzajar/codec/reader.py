"""
stanza 解码器（Reader）。

用法：

    reader = Reader(open("regions.stanza", "rb"))
    for rec in reader:
        print(rec.get("name"))
    print(reader.field_registry())

约定：
- decode_next() 跳过空记录（连续空行/注释/空分隔），直到读出至少含一个字段的记录或流结束。
- 流结束返回 None；流结束前未遇到分隔行的最后一条记录照常返回一次。
- 解析错误立即抛出，不自动重同步；需要跳过坏记录时由调用方显式调用 skip_record()。
- 字段名登记表属于 Reader 实例，按首次出现顺序单调增长。
"""

from __future__ import annotations

import logging
from typing import Any, Iterator

from ..config import StanzaOptions
from ..domain.record import Record
from .assembler import RecordAssembler
from .rune_source import RuneSource


logger = logging.getLogger(__name__)


class Reader:
    def __init__(self, source: Any, *, options: StanzaOptions | None = None) -> None:
        opts = options or StanzaOptions()
        self.source = RuneSource(source, encoding=opts.encoding, chunk_size=opts.chunk_size)
        self._registry: list[str] = []
        self._assembler = RecordAssembler(self.source, self._registry)
        self._more = True

    @property
    def line(self) -> int:
        return self.source.line

    def decode_next(self) -> Record | None:
        """读取下一条非空记录；流结束返回 None。"""

        while self._more:
            record, self._more = self._assembler.next_record()
            if record:
                logger.debug("record decoded: %d fields, line=%d", len(record), self.line)
                return record
        logger.debug("end of stream at line %d", self.line)
        return None

    read = decode_next

    def field_registry(self) -> list[str]:
        """至今读到过的全部字段名（首次出现顺序、去重）。"""

        return list(self._registry)

    keys = field_registry

    def skip_record(self) -> bool:
        """解析失败后跳到下一条分隔行之后；返回流是否还有后续内容。"""

        logger.debug("skipping to next record boundary from line %d", self.line)
        self._more = self._assembler.skip_to_boundary()
        return self._more

    def __iter__(self) -> Iterator[Record]:
        while True:
            record = self.decode_next()
            if record is None:
                return
            yield record
