"""Per-test and once-per-suite contexts."""

from lazyspec import describe, do_it, expect, fixture, it, using, using_once


class Inventory:
    def __init__(self):
        self.items: dict[str, int] = {}

    def add(self, name: str, count: int = 1) -> None:
        self.items[name] = self.items.get(name, 0) + count

    def count(self, name: str) -> int:
        return self.items.get(name, 0)


@fixture
def inventory():
    inv = Inventory()
    yield inv
    inv.items.clear()


@fixture
async def stocked(inventory):
    inventory.add("apple", 3)
    return inventory


describe(Inventory,
    using(["inv", inventory],
        it("starts empty", lambda inv: inv.count("apple") == 0),
        do_it("adds items",
            lambda inv: inv.add("pear"),
            lambda inv: expect(inv.count("pear") == 1),
        ),
        it("is fresh for every test", lambda inv: inv.count("pear") == 0),
    ),

    using_once("shared between tests", ["inventory", inventory],
        using(["inv", stocked],
            it("sees stocked apples", lambda inv: inv.count("apple") == 3),
        ),
        do_it("accumulates across tests",
            lambda inventory: inventory.add("apple"),
            lambda inventory: expect(inventory.count("apple") == 4),
        ),
    ),

    using("derived values", ["base", 10, "limit", lambda base: base * 2],
        it("computes bindings in order", lambda base, limit: limit == 2 * base),
    ),
)
