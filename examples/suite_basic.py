"""Basic lazyspec suite. Run with: lazyspec run examples/"""

from lazyspec import describe, do_it, expect, given, it, testing


def slugify(text: str) -> str:
    """Lowercase words joined by dashes."""
    return "-".join(text.lower().split())


describe(slugify, "turns titles into slugs", {"tags": ["strings"]},
    it("lowercases", lambda: slugify("Hello") == "hello"),
    it("joins words with dashes", lambda: slugify("Hello big World") == "hello-big-world"),
    it("collapses repeated whitespace", lambda: slugify("a   b") == "a-b"),
    it("strips punctuation"),  # pending until implemented

    testing("with empty input",
        it("returns an empty string", lambda: slugify("") == ""),
    ),

    given(["title", "Release Notes"],
        lambda title: it(f"handles {title!r}", lambda: slugify(title) == "release-notes"),
    ),

    do_it("keeps dashes already present",
        lambda: expect(slugify("pre-release") == "pre-release"),
    ),
)
