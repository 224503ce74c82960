"""
字段词法（FieldLexer）：在 RuneSource 之上识别字段名与（可折行的）字段值。

行首（字段名位置）的判定：
- `#` 开头：整行注释，跳过
- `%` 开头：记录分隔行，本行余下内容忽略
- 空行 / 只有空白的行：忽略
- 其余：字段名，读到 `:` 或行尾为止

字段值的折行规则：
- 行内空白串折叠为一个空格，值的开头不插入空白
- 行尾之后遇到空行：记一个段落换行（多个连续空行只记一次）
- 以空白开头的行是续行：前面没有空行则以一个空格连接，否则以 "\n" 连接
- `#` 行跳过；`%` 行同时结束字段与记录
- 其他字符开头：字段结束，该字符回退给下一个字段名
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..domain.record import normalize_field_name
from .rune_source import EOS, LINE_END, RuneSource


COMMENT_CHAR = "#"
DELIMITER_CHAR = "%"
NAME_SEPARATOR = ":"


class NameKind(Enum):
    FIELD = "field"
    BLANK = "blank"
    COMMENT = "comment"
    DELIMITER = "delimiter"
    END = "end"


class Follow(Enum):
    """字段值之后是什么。"""

    NEXT_FIELD = "next_field"
    DELIMITER = "delimiter"
    END = "end"


@dataclass(frozen=True)
class NameToken:
    kind: NameKind
    name: str = ""
    has_value: bool = False


def _is_blank(ch: str) -> bool:
    return ch != LINE_END and ch.isspace()


class FieldLexer:
    def __init__(self, source: RuneSource) -> None:
        self.source = source
        self._scratch: list[str] = []

    def parse_name(self) -> NameToken:
        src = self.source
        ch = src.next()
        if ch == EOS:
            return NameToken(NameKind.END)
        if ch == COMMENT_CHAR:
            src.skip_until(LINE_END)
            return NameToken(NameKind.COMMENT)
        if ch == DELIMITER_CHAR:
            src.skip_until(LINE_END)
            return NameToken(NameKind.DELIMITER)

        buf = self._scratch
        buf.clear()
        while ch != EOS and ch != LINE_END:
            if ch == NAME_SEPARATOR:
                return NameToken(NameKind.FIELD, normalize_field_name("".join(buf)), True)
            buf.append(ch)
            ch = src.next()

        name = normalize_field_name("".join(buf))
        if name == "":
            return NameToken(NameKind.BLANK)
        # 没有 `:` 的字段名：只表示“存在”，值为空
        return NameToken(NameKind.FIELD, name, False)

    def parse_value(self) -> tuple[str, Follow]:
        src = self.source
        buf = self._scratch
        buf.clear()
        pending_space = False
        joiner = ""

        while True:
            ch = src.next()
            if ch == EOS:
                return "".join(buf), Follow.END
            if ch == LINE_END:
                follow, paragraph = self._scan_line_start()
                if follow is not None:
                    return "".join(buf), follow
                if buf:
                    joiner = "\n" if paragraph else " "
                pending_space = False
                continue
            if _is_blank(ch):
                if buf:
                    pending_space = True
                continue
            if joiner:
                buf.append(joiner)
                joiner = ""
            elif pending_space:
                buf.append(" ")
            pending_space = False
            buf.append(ch)

    def _scan_line_start(self) -> tuple[Follow | None, bool]:
        """在字段值的行尾之后检查后续行。

        返回 (follow, paragraph)：follow 非 None 表示字段到此结束；
        否则下一个字符属于续行内容，paragraph 表示其间是否出现过空行。
        """

        src = self.source
        paragraph = False
        while True:
            ch = src.next()
            if ch == EOS:
                return Follow.END, paragraph
            if ch == LINE_END:
                paragraph = True
                continue
            if ch == COMMENT_CHAR:
                if not src.skip_until(LINE_END):
                    return Follow.END, paragraph
                continue
            if ch == DELIMITER_CHAR:
                src.skip_until(LINE_END)
                return Follow.DELIMITER, paragraph
            if _is_blank(ch):
                while _is_blank(ch):
                    ch = src.next()
                if ch == EOS:
                    return Follow.END, paragraph
                if ch == LINE_END:
                    # 只有空白的行按空行处理
                    paragraph = True
                    continue
                src.pushback(ch)
                return None, paragraph
            src.pushback(ch)
            return Follow.NEXT_FIELD, paragraph
