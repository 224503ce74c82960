"""
stanza 记录（Record）与字段名归一化。

约定：
- 字段名大小写不敏感：一律小写存储。
- 字段名内部的空白串折叠成一个 `-`（例如 "ISO 3166" → "iso-3166"），首尾空白去掉。
- 同一条记录内字段名唯一；以归一化结果作为比较键。
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from .errors import DuplicateFieldError


def normalize_field_name(name: str) -> str:
    """归一化字段名（幂等）。"""

    return "-".join(name.split()).lower()


def is_normalized_field_name(name: str) -> bool:
    return name != "" and normalize_field_name(name) == name


class Record(dict[str, str]):
    """一条 stanza 记录：归一化字段名 → 字符串值。"""

    def __init__(self, items: Mapping[str, str] | Iterable[tuple[str, str]] = ()) -> None:
        super().__init__()
        pairs = items.items() if isinstance(items, Mapping) else items
        for key, value in pairs:
            self.set(key, value)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "Record":
        """从任意 mapping 构造；归一化后重名视为错误（不覆盖）。"""

        rec = cls()
        for key, value in mapping.items():
            rec.add(str(key), "" if value is None else str(value))
        return rec

    def set(self, key: str, value: str) -> None:
        """设置字段值，覆盖已有值。"""

        super().__setitem__(normalize_field_name(key), value)

    def add(self, key: str, value: str, *, line: int = 0) -> None:
        """新增字段；字段已存在时抛 DuplicateFieldError。"""

        k = normalize_field_name(key)
        if super().__contains__(k):
            raise DuplicateFieldError(line, k)
        super().__setitem__(k, value)

    def get(self, key: str, default: str = "") -> str:  # type: ignore[override]
        return super().get(normalize_field_name(key), default)

    def __getitem__(self, key: str) -> str:
        return super().__getitem__(normalize_field_name(key))

    def __setitem__(self, key: str, value: str) -> None:
        self.set(key, value)

    def __delitem__(self, key: str) -> None:
        super().__delitem__(normalize_field_name(key))

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        return super().__contains__(normalize_field_name(key))

    def pop(self, key: str, *default: str) -> str:  # type: ignore[override]
        return super().pop(normalize_field_name(key), *default)

    def setdefault(self, key: str, default: str = "") -> str:  # type: ignore[override]
        return super().setdefault(normalize_field_name(key), default)

    def update(self, *args: Any, **kwargs: str) -> None:  # type: ignore[override]
        """按 set 语义逐个写入（覆盖已有值）。"""

        for key, value in dict(*args, **kwargs).items():
            self.set(key, value)

    def copy(self) -> "Record":
        return type(self)(self)
