"""
Speed: get through a set quickly.

Every card starts with weight 1. Two correct answers in a row retire it
(weight 0). A wrong answer doubles its weight, so cards you miss come up
more often, and a correct answer on a card above weight 1 brings it back
to 1 rather than retiring it outright. A card missed three times in one
pass is marked difficult.
"""

RESPONSES = ["y", "n"]

DIFFICULT_AFTER_MISSES = 3

# Doubling stops here so weights stay finite
MAX_WEIGHT = 1e6


def get_weight(metadata, difficult):
    return metadata["weight"]


def adjust_card(response, metadata, difficult):
    weight = metadata["weight"]
    misses = metadata["misses"]

    if response == "y":
        if weight > 1.0:
            weight = 1.0
        else:
            weight = max(0.0, weight - 0.5)
    else:
        weight = min(weight * 2.0, MAX_WEIGHT)
        misses += 1

    difficult = difficult or misses >= DIFFICULT_AFTER_MISSES
    return [{"weight": weight, "misses": misses}, difficult]


def get_default_metadata():
    return {"weight": 1.0, "misses": 0}
