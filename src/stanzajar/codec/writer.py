"""
stanza 编码器（Writer）。

输出格式：
- 每个字段一行：`name: value`；值内空白串折叠为一个空格，首尾空白去掉。
- 值内的换行写成“行尾 + 一个缩进字符（默认 tab）”，即续行折叠；
  Reader 会把这种续行读回为一个空格，因此段落换行在一次往返后被归一化，之后输出幂等。
  保留段落（空行 + 续行）的写法不支持。
- 记录末尾写分隔行 `%%`；一个字段都没写出的记录不写分隔行。
- force_empty=True 时，空值字段只写字段名一行（仅表示存在）。

字段顺序：
- set_output_fields() 指定后对所有后续记录生效；
- 未指定时按记录自身字段名的字典序输出（不依赖插入顺序，保证输出可复现）；
  这些字段名同样要过 check_output_field，含 `:` 或以 `#`/`%` 开头的字段名抛 ConfigError。
"""

from __future__ import annotations

import io
import logging
from typing import Any, Iterable, Mapping

from ..config import StanzaOptions, check_output_field
from ..domain.errors import ConfigError, StanzaIOError
from ..domain.record import Record


logger = logging.getLogger(__name__)

DELIMITER_LINE = "%%"
NAME_SEPARATOR = ": "


def _is_binary_sink(sink: Any) -> bool:
    if isinstance(sink, io.TextIOBase):
        return False
    if isinstance(sink, (io.RawIOBase, io.BufferedIOBase)):
        return True
    return "b" in str(getattr(sink, "mode", ""))


class Writer:
    def __init__(self, sink: Any, *, options: StanzaOptions | None = None) -> None:
        opts = options or StanzaOptions()
        self._sink = sink
        self._binary = _is_binary_sink(sink)
        self._encoding = opts.encoding
        self._line_end = opts.line_end
        self._fold = opts.line_end + opts.fold_indent
        self._buffer_size = opts.buffer_size
        self._pending: list[str] = []
        self._pending_len = 0
        self._fields: list[str] = []
        self.force_empty = opts.force_empty
        if opts.output_fields:
            self.set_output_fields(opts.output_fields)

    def set_output_fields(self, names: Iterable[str]) -> None:
        """固定后续所有记录的字段输出顺序；重复项只保留第一次出现。"""

        if isinstance(names, str):
            raise ConfigError(f"输出字段列表必须是字段名序列，不能是单个字符串：{names!r}")
        fields: list[str] = []
        for name in names:
            check_output_field(name)
            if name not in fields:
                fields.append(name)
        self._fields = fields

    def output_fields(self) -> list[str]:
        return list(self._fields)

    def write(self, record: Mapping[str, Any]) -> None:
        rec = record if isinstance(record, Record) else Record.from_mapping(record)
        names = self._fields
        if not names:
            # 记录自身的字段名也必须能被重新解析；全部通过才开始写
            names = sorted(rec.keys())
            for name in names:
                check_output_field(name)
        written = False
        for name in names:
            value = self._fold_value(rec.get(name))
            if value == "":
                if not self.force_empty:
                    continue
                self._emit(name + self._line_end)
            else:
                self._emit(name + NAME_SEPARATOR + value + self._line_end)
            written = True
        if written:
            self._emit(DELIMITER_LINE + self._line_end)

    def flush(self) -> None:
        """把缓冲写到 sink 并调用 sink.flush()（若有）；可重复调用。"""

        self._drain("flush")
        flush = getattr(self._sink, "flush", None)
        if flush is None:
            return
        try:
            flush()
        except (OSError, ValueError) as e:
            raise StanzaIOError("flush", str(e)) from e

    def _fold_value(self, value: str) -> str:
        lines = []
        for line in value.split("\n"):
            words = line.split()
            if words:
                lines.append(" ".join(words))
        return self._fold.join(lines)

    def _emit(self, text: str) -> None:
        self._pending.append(text)
        self._pending_len += len(text)
        if self._pending_len > self._buffer_size:
            self._drain("write")

    def _drain(self, op: str) -> None:
        if not self._pending:
            return
        data = "".join(self._pending)
        try:
            self._sink.write(data.encode(self._encoding) if self._binary else data)
        except (OSError, ValueError) as e:
            # 已关闭的流抛 ValueError，同样视为 sink 失败
            raise StanzaIOError(op, str(e)) from e
        self._pending.clear()
        self._pending_len = 0
        logger.debug("%s: %d chars written to sink", op, len(data))
