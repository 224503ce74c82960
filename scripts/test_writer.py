"""
Writer 回归测试：字段顺序、空值策略、折行输出、字段列表校验、sink 错误包装。

用法：
  python scripts/test_writer.py
"""

from __future__ import annotations

import io
import sys
from pathlib import Path
from typing import Any

import pytest


REPO_ROOT = Path(__file__).resolve().parents[1]


def _ensure_src_on_path(repo_root: Path) -> None:
    src_dir = repo_root / "src"
    if not src_dir.exists():
        raise RuntimeError(f"找不到 src：{src_dir}")
    sys.path.insert(0, str(src_dir))


def _write(records: list[Any], *, fields: list[str] | None = None, force_empty: bool = False) -> str:
    from stanzajar import Writer

    buf = io.StringIO()
    w = Writer(buf)
    if fields is not None:
        w.set_output_fields(fields)
    w.force_empty = force_empty
    for rec in records:
        w.write(rec)
    w.flush()
    return buf.getvalue()


class _BrokenSink:
    def write(self, data: str) -> int:
        raise OSError("disk full")


def test_explicit_field_order() -> None:
    from stanzajar import Record

    rec = Record({"name": "Arg", "capital": "BA"})
    assert _write([rec], fields=["capital", "name"]) == "capital: BA\nname: Arg\n%%\n"


def test_fallback_order_is_sorted() -> None:
    out = _write([{"zone": "S", "Name": "Arg", "capital": "BA"}])
    assert out == "capital: BA\nname: Arg\nzone: S\n%%\n"


def test_empty_values_are_skipped() -> None:
    assert _write([{"name": "X", "empty": "   "}]) == "name: X\n%%\n"
    # 全部为空：连分隔行也不写
    assert _write([{"a": "", "b": " \t "}]) == ""
    assert _write([{"a": "1"}], fields=["b"]) == ""


def test_force_empty_writes_bare_names() -> None:
    out = _write([{"name": "X"}], fields=["name", "capital"], force_empty=True)
    assert out == "name: X\ncapital\n%%\n"
    assert _write([{}], fields=["a"], force_empty=True) == "a\n%%\n"


def test_value_whitespace_and_folding() -> None:
    out = _write([{"anthem": "  one  two\nthree\n\n four  "}])
    assert out == "anthem: one two\n\tthree\n\tfour\n%%\n"


def test_crlf_output_and_space_indent() -> None:
    from stanzajar import StanzaOptions, Writer

    buf = io.StringIO()
    w = Writer(buf, options=StanzaOptions(line_end="\r\n", fold_indent=" "))
    w.write({"a": "x\ny"})
    w.flush()
    assert buf.getvalue() == "a: x\r\n y\r\n%%\r\n"


def test_set_output_fields_validation() -> None:
    from stanzajar import ConfigError, Writer

    w = Writer(io.StringIO())
    w.set_output_fields(["name", "iso-3166", "name", "category"])
    assert w.output_fields() == ["name", "iso-3166", "category"]

    for bad in (["Name"], ["iso 3166"], [""], ["a:b"], ["#note"], ["%%"], [" name"]):
        with pytest.raises(ConfigError):
            w.set_output_fields(bad)
    # 校验失败不改变已有设置
    assert w.output_fields() == ["name", "iso-3166", "category"]


def test_set_output_fields_rejects_single_string() -> None:
    from stanzajar import ConfigError, Writer

    w = Writer(io.StringIO())
    with pytest.raises(ConfigError):
        w.set_output_fields("name")
    assert w.output_fields() == []


def test_fallback_rejects_unparseable_field_names() -> None:
    from stanzajar import ConfigError, Record, Writer

    for key in ("#tag", "%pct"):
        rec = Record()
        rec.set(key, "1")
        rec.set("b", "2")
        buf = io.StringIO()
        w = Writer(buf)
        with pytest.raises(ConfigError):
            w.write(rec)
        w.flush()
        # 整条记录都不写出
        assert buf.getvalue() == ""

    with pytest.raises(ConfigError):
        _write([{"a:b": "x"}])


def test_explicit_fields_ignore_unlisted_keys() -> None:
    from stanzajar import Record

    rec = Record()
    rec.set("#tag", "1")
    rec.set("b", "2")
    assert _write([rec], fields=["b"]) == "b: 2\n%%\n"


def test_output_fields_from_options() -> None:
    from stanzajar import StanzaOptions, Writer

    w = Writer(io.StringIO(), options=StanzaOptions(output_fields=["b", "a", "b"], force_empty=True))
    assert w.output_fields() == ["b", "a"]
    assert w.force_empty is True


def test_colliding_mapping_keys_fail() -> None:
    from stanzajar import DuplicateFieldError

    with pytest.raises(DuplicateFieldError):
        _write([{"Name": "a", "name": "b"}])


def test_binary_sink() -> None:
    from stanzajar import Writer

    buf = io.BytesIO()
    w = Writer(buf)
    w.write({"name": "Córdoba"})
    w.flush()
    assert buf.getvalue() == "name: Córdoba\n%%\n".encode("utf-8")


def test_output_is_buffered_until_flush() -> None:
    from stanzajar import Writer

    buf = io.StringIO()
    w = Writer(buf)
    w.write({"a": "1"})
    assert buf.getvalue() == ""
    w.flush()
    w.flush()
    assert buf.getvalue() == "a: 1\n%%\n"


def test_buffer_drains_past_threshold() -> None:
    from stanzajar import StanzaOptions, Writer

    buf = io.StringIO()
    w = Writer(buf, options=StanzaOptions(buffer_size=1))
    w.write({"a": "1"})
    assert buf.getvalue() == "a: 1\n%%\n"


def test_sink_errors_are_wrapped() -> None:
    from stanzajar import StanzaIOError, StanzaOptions, Writer

    w = Writer(_BrokenSink())
    w.write({"a": "1"})
    with pytest.raises(StanzaIOError) as ei:
        w.flush()
    assert ei.value.op == "flush"
    assert isinstance(ei.value.__cause__, OSError)

    w = Writer(_BrokenSink(), options=StanzaOptions(buffer_size=1))
    with pytest.raises(StanzaIOError) as ei:
        w.write({"a": "1"})
    assert ei.value.op == "write"


def test_closed_sink_is_io_error() -> None:
    from stanzajar import StanzaIOError, Writer

    buf = io.StringIO()
    w = Writer(buf)
    w.write({"a": "1"})
    buf.close()
    with pytest.raises(StanzaIOError):
        w.flush()


def main() -> None:
    _ensure_src_on_path(REPO_ROOT)

    test_explicit_field_order()
    test_fallback_order_is_sorted()
    test_empty_values_are_skipped()
    test_force_empty_writes_bare_names()
    test_value_whitespace_and_folding()
    test_crlf_output_and_space_indent()
    test_set_output_fields_validation()
    test_set_output_fields_rejects_single_string()
    test_fallback_rejects_unparseable_field_names()
    test_explicit_fields_ignore_unlisted_keys()
    test_output_fields_from_options()
    test_colliding_mapping_keys_fail()
    test_binary_sink()
    test_output_is_buffered_until_flush()
    test_buffer_drains_past_threshold()
    test_sink_errors_are_wrapped()
    test_closed_sink_is_io_error()
    print("[OK] writer")


if __name__ == "__main__":
    main()
