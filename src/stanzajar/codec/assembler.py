"""
记录组装（RecordAssembler）：驱动字段名/字段值解析，组装一条记录。

约束：
- 只有“字段名与字段值都非空”的字段才写入记录。
- 同一记录内重名必须失败（DuplicateFieldError，带重复字段所在行号），不覆盖。
- 字段名登记表由 Reader 持有并传入；这里只按首次出现顺序追加。
"""

from __future__ import annotations

from ..domain.record import Record
from .lexer import DELIMITER_CHAR, FieldLexer, Follow, NameKind
from .rune_source import EOS, LINE_END, RuneSource


class RecordAssembler:
    def __init__(self, source: RuneSource, registry: list[str]) -> None:
        self.source = source
        self.lexer = FieldLexer(source)
        self._registry = registry
        self._seen = set(registry)
        # 上一次失败时记录边界（分隔行/流结束）是否已经被读掉
        self._at_boundary = True
        self._ended = False

    def next_record(self) -> tuple[Record, bool]:
        """读一条记录；返回 (record, more)。record 可能为空，more=False 表示流已结束。"""

        record = Record()
        self._at_boundary = False
        while True:
            line = self.source.line
            tok = self.lexer.parse_name()
            if tok.kind is NameKind.END:
                self._at_boundary = self._ended = True
                return record, False
            if tok.kind is NameKind.DELIMITER:
                self._at_boundary = True
                return record, True
            if tok.kind is not NameKind.FIELD:
                continue

            if tok.has_value:
                value, follow = self.lexer.parse_value()
            else:
                value, follow = "", Follow.NEXT_FIELD
            if follow is not Follow.NEXT_FIELD:
                self._at_boundary = True
                self._ended = follow is Follow.END

            if tok.name and value:
                record.add(tok.name, value, line=line)
                if tok.name not in self._seen:
                    self._seen.add(tok.name)
                    self._registry.append(tok.name)

            if follow is Follow.DELIMITER:
                return record, True
            if follow is Follow.END:
                return record, False

    def skip_to_boundary(self) -> bool:
        """跳到下一条分隔行之后；返回流是否还有后续内容。

        上一次失败时边界已被读掉（例如重名字段正好是记录最后一个字段）则不跳。
        """

        if self._at_boundary:
            return not self._ended
        src = self.source
        self._at_boundary = True
        while True:
            ch = src.next()
            if ch == EOS:
                self._ended = True
                return False
            if ch == DELIMITER_CHAR:
                src.skip_until(LINE_END)
                return True
            if ch != LINE_END and not src.skip_until(LINE_END):
                self._ended = True
                return False
