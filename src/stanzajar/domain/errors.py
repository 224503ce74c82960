"""
stanza 编解码的异常类型。

约定：
- 所有编解码错误都继承 StanzaError，调用方可以一次性捕获。
- 解析错误必须携带 1 起始的行号；不做自动跳过或静默降级（正确地失败）。
- 流结束不是错误：Reader.decode_next() 返回 None。
"""

from __future__ import annotations


class StanzaError(Exception):
    """stanza 编解码错误的根类型。"""


class ParseError(StanzaError, ValueError):
    """输入文本无法按 stanza 语法解析。"""

    def __init__(self, line: int, kind: str, message: str) -> None:
        super().__init__(f"line {line}: {message}")
        self.line = line
        self.kind = kind


class DuplicateFieldError(ParseError):
    """同一条记录内出现了归一化后相同的字段名。"""

    def __init__(self, line: int, field_name: str) -> None:
        super().__init__(line, "duplicate-field", f"字段重复：{field_name!r}")
        self.field_name = field_name


class ConfigError(StanzaError, ValueError):
    """Writer 字段列表或选项文件非法。"""


class StanzaIOError(StanzaError, OSError):
    """底层 source/sink 读写失败；原始异常通过 __cause__ 保留。"""

    def __init__(self, op: str, message: str, line: int | None = None) -> None:
        where = f" (line {line})" if line is not None else ""
        super().__init__(f"stanza {op} 失败{where}：{message}")
        self.op = op
        self.line = line
