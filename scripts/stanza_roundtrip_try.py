"""
stanza 往返演示：读一个 stanza 文件，按字段名登记表顺序重新写出。

目标：
- 打印读到的记录数与字段名登记表
- 把重新编码后的文本写到 stdout（或 --out 指定的文件）

运行：
  python scripts/stanza_roundtrip_try.py
  python scripts/stanza_roundtrip_try.py docs/data/examples/ar_provinces.stanza --options docs/data/stanza_options.example.yaml
  python scripts/stanza_roundtrip_try.py some.stanza --force-empty --out temp/out.stanza
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path


REPO_ROOT = Path(__file__).resolve().parents[1]
EXAMPLE = REPO_ROOT / "docs" / "data" / "examples" / "ar_provinces.stanza"


def _ensure_src_on_path(repo_root: Path) -> None:
    src_dir = repo_root / "src"
    if not src_dir.exists():
        raise RuntimeError(f"找不到 src：{src_dir}")
    sys.path.insert(0, str(src_dir))


def main() -> int:
    _ensure_src_on_path(REPO_ROOT)

    from stanzajar import Reader, StanzaError, Writer, load_options

    parser = argparse.ArgumentParser(add_help=True)
    parser.add_argument("path", nargs="?", default=str(EXAMPLE))
    parser.add_argument("--options", default=None)
    parser.add_argument("--force-empty", action="store_true", default=False)
    parser.add_argument("--out", default=None)
    args = parser.parse_args()

    opts = load_options(args.options)
    with open(args.path, "rb") as f:
        reader = Reader(f, options=opts)
        try:
            records = list(reader)
        except StanzaError as e:
            print(f"[FAIL] {args.path}: {e}")
            return 1

    print(f"[read]   records={len(records)} fields={reader.field_registry()}", file=sys.stderr)

    out_path = Path(args.out) if args.out else None
    if out_path is not None:
        out_path.parent.mkdir(parents=True, exist_ok=True)
    sink = out_path.open("wb") if out_path is not None else sys.stdout
    try:
        w = Writer(sink, options=opts)
        if not w.output_fields():
            w.set_output_fields(reader.field_registry())
        if args.force_empty:
            w.force_empty = True
        for rec in records:
            w.write(rec)
        w.flush()
    finally:
        if out_path is not None:
            sink.close()

    if out_path is not None:
        print(f"[write]  {out_path}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
