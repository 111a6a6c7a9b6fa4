"""Python declarations of the reptile lesson scenarios."""
from substitutability_kit.contracts import INHERITED, Contract, declare


SAMPLES = [{"name": "Kaa"}, {"name": "Nagini"}, {"name": "Sir Hiss"}]


def crawls(sample, output):
    return output == f"{sample['name']} crawls away"


def slithers(sample, output):
    return output == f"{sample['name']} slithers away"


def slither(sample):
    return f"{sample['name']} slithers away"


def crawl(sample):
    return f"{sample['name']} crawls away"


def legless_contract_hierarchy():
    """Reptile declares nothing; LeglessReptile promises slithering; Snake slithers."""
    return [
        declare("Reptile"),
        declare("LeglessReptile", "Reptile", contracts={"move": Contract("move", slithers, "slithers away")}),
        declare("Snake", "LeglessReptile", operations={"move": slither}),
    ]


def crawling_reptile_hierarchy():
    """Reptile promises crawling; Snake overrides move to slither."""
    return [
        declare("Reptile", contracts={"move": crawls}, operations={"move": crawl}),
        declare("Snake", "Reptile", operations={"move": slither}),
    ]


def purely_inherited_hierarchy():
    """Lizard overrides nothing and inherits Reptile's crawling."""
    return [
        declare("Reptile", contracts={"move": crawls}, operations={"move": crawl}),
        declare("Lizard", "Reptile", operations={"move": INHERITED}),
    ]


def cyclic_hierarchy():
    """Snake -> LeglessReptile -> Snake."""
    return [
        declare("LeglessReptile", "Snake", contracts={"move": slithers}),
        declare("Snake", "LeglessReptile", operations={"move": slither}),
    ]
