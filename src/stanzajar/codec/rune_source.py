"""
字符源（RuneSource）：逐字符读取输入，支持单槽回退。

约定：
- "\r\n" 折叠为一个逻辑行尾 "\n"；孤立的 "\r" 原样返回。
- 流结束返回空串 ""。
- source 可以是 str / bytes / 文本流 / 二进制流；字节按 encoding 增量解码。
"""

from __future__ import annotations

import codecs
import io
from typing import Any

from ..domain.errors import ParseError, StanzaIOError


LINE_END = "\n"
EOS = ""


class RuneSource:
    def __init__(self, source: Any, *, encoding: str = "utf-8", chunk_size: int = 4096) -> None:
        if isinstance(source, str):
            source = io.StringIO(source)
        elif isinstance(source, (bytes, bytearray)):
            source = io.BytesIO(bytes(source))
        self._stream = source
        self._decoder = codecs.getincrementaldecoder(encoding)()
        self._chunk_size = chunk_size
        self._buf = ""
        self._pos = 0
        self._eof = False
        self._pushed: str | None = None
        self.line = 1

    def _fill(self) -> bool:
        """缓冲区读尽时再读一块；返回是否还有可读字符。"""

        while self._pos >= len(self._buf):
            if self._eof:
                return False
            try:
                chunk = self._stream.read(self._chunk_size)
            except UnicodeDecodeError as e:
                raise ParseError(self.line, "encoding", f"无法解码输入：{e.reason}") from e
            except (OSError, ValueError) as e:
                # 已关闭的流抛 ValueError
                raise StanzaIOError("read", str(e), self.line) from e
            final = not chunk
            if isinstance(chunk, (bytes, bytearray)):
                try:
                    chunk = self._decoder.decode(chunk, final=final)
                except UnicodeDecodeError as e:
                    raise ParseError(self.line, "encoding", f"无法解码输入：{e.reason}") from e
            elif final:
                chunk = ""
            self._eof = final
            self._buf = chunk
            self._pos = 0
        return True

    def _take(self) -> str:
        if not self._fill():
            return EOS
        ch = self._buf[self._pos]
        self._pos += 1
        return ch

    def next(self) -> str:
        """读取一个字符；"\r\n" 返回 "\n"，流结束返回 ""。"""

        if self._pushed is not None:
            ch = self._pushed
            self._pushed = None
        else:
            ch = self._take()
            if ch == "\r" and self._fill() and self._buf[self._pos] == "\n":
                self._pos += 1
                ch = LINE_END
        if ch == LINE_END:
            self.line += 1
        return ch

    def pushback(self, ch: str) -> None:
        """回退刚读到的一个字符（只有一个槽位）。"""

        if ch == EOS:
            return
        if self._pushed is not None:
            raise RuntimeError("RuneSource 只支持回退一个字符")
        self._pushed = ch
        if ch == LINE_END:
            self.line -= 1

    def skip_until(self, delim: str = LINE_END) -> bool:
        """读到并包含 delim 为止；流先结束则返回 False。"""

        while True:
            ch = self.next()
            if ch == EOS:
                return False
            if ch == delim:
                return True
