"""
stanza 的领域模型：记录（Record）、字段名归一化与异常类型。
"""
