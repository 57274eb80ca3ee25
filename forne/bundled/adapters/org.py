"""
Org-mode drill adapter.

Picks up headings of the form ``* [ ] Question :drill:`` whose answer lives
in a child heading named ``Answer``. Heading stars inside the answer are
stripped so nested notes read as plain text.
"""

DRILL = r"\*+ \[ \] (.*) :drill:[\s\S]*?(\*+)\* Answer\n([\s\S]*?)(?=(\n\*(?!\2)|$))"


def get_pairs(source):
    pairs = []
    for question, answer in regexp_to_pairs(DRILL, 1, 3, source):
        pairs.append([question, replace_all(r"(?m)^\*+ ", "", answer)])
    return pairs
