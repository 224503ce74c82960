"""
stanza 文本编解码。

分层（自底向上）：
- rune_source：带单槽回退的字符源，CRLF 折叠为一个行尾
- lexer：字段名/字段值（含折行）词法
- assembler：把字段组装成一条记录，检查重名并维护字段名登记表
- reader / writer：对外的解码器与编码器
"""
