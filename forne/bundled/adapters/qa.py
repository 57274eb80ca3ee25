"""
Plain question/answer adapter.

Reads blocks like::

    Q: What is the capital of France?
    A: Paris

An answer runs until the next ``Q:`` line or a blank line.
"""

BLOCK = r"(?m)^Q:[ \t]*(.+?)[ \t]*\n^A:[ \t]*([\s\S]*?)[ \t]*(?=\n[ \t]*\n|\nQ:|\n?\Z)"


def get_pairs(source):
    return regexp_to_pairs(BLOCK, 1, 2, source.replace("\r\n", "\n"))
