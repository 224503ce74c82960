"""
编解码选项（StanzaOptions）与 YAML 选项文件加载。

约定：
- 选项文件是一个 YAML mapping，键与 StanzaOptions 字段同名；未知键视为错误。
- 校验失败统一抛 ConfigError（不静默回退到默认值）。

示例（docs/data/stanza_options.example.yaml）：

    encoding: utf-8
    line_end: "\\n"
    fold_indent: "\\t"
    force_empty: false
    output_fields: [iso3166-2, name, category]
"""

from __future__ import annotations

import codecs
from pathlib import Path
from typing import Any, Literal, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .domain.errors import ConfigError
from .domain.record import is_normalized_field_name


def check_output_field(name: str) -> str:
    """Writer 输出字段名必须已经是归一化形式，且能被 Reader 重新解析为字段名。"""

    if not isinstance(name, str) or name == "":
        raise ConfigError(f"输出字段名为空：{name!r}")
    if not is_normalized_field_name(name):
        raise ConfigError(f"输出字段名未归一化（需小写、空白折叠为 '-'）：{name!r}")
    if ":" in name or name[0] in "#%":
        raise ConfigError(f"输出字段名无法被重新解析：{name!r}")
    return name


class StanzaOptions(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    encoding: str = "utf-8"
    line_end: Literal["\n", "\r\n"] = "\n"
    fold_indent: Literal["\t", " "] = "\t"
    force_empty: bool = False
    output_fields: list[str] = Field(default_factory=list)
    buffer_size: int = Field(default=4096, ge=1)
    chunk_size: int = Field(default=4096, ge=1)

    @field_validator("encoding")
    @classmethod
    def _known_encoding(cls, v: str) -> str:
        try:
            codecs.lookup(v)
        except LookupError as e:
            raise ValueError(f"未知编码：{v!r}") from e
        return v

    @field_validator("output_fields")
    @classmethod
    def _normalized_fields(cls, v: list[str]) -> list[str]:
        for name in v:
            try:
                check_output_field(name)
            except ConfigError as e:
                raise ValueError(str(e)) from e
        return v


def options_from_mapping(d: Mapping[str, Any] | None) -> StanzaOptions:
    if d is None:
        return StanzaOptions()
    if not isinstance(d, Mapping):
        raise ConfigError(f"选项必须是 mapping，实际为 {type(d).__name__}")
    try:
        return StanzaOptions.model_validate(dict(d))
    except ValidationError as e:
        raise ConfigError(f"选项非法：{e}") from e


def load_options(path: Path | str | None = None) -> StanzaOptions:
    """从 YAML 文件加载选项；不给路径则返回默认值。"""

    if path is None:
        return StanzaOptions()
    p = Path(path)
    try:
        d = yaml.safe_load(p.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"选项文件不是合法 YAML：{p}") from e
    if d is None:
        return StanzaOptions()
    return options_from_mapping(d)
