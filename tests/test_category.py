from dataclasses import dataclass, field

from clikit.category import (
    CommandCategories,
    CommandCategory,
    FlagCategories,
    flag_categories_from_flags,
)


@dataclass
class FakeCommand:
    name: str
    hidden: bool = False


@dataclass
class FakeFlag:
    name: str
    category: str = ""
    hidden: bool = False
    aliases: list = field(default_factory=list)

    def is_visible(self):
        return not self.hidden

    def __str__(self):
        return f"--{self.name}"


class PlainThing:
    def __str__(self):
        return "plain"


def test_add_command_groups_by_category():
    c1, c2, c3 = FakeCommand("command1"), FakeCommand("command2"), FakeCommand("command3")
    cats = CommandCategories()
    cats.add_command("1", c1)
    cats.add_command("1", c2)
    cats.add_command("2", c3)
    result = cats.categories()
    assert [c.name for c in result] == ["1", "2"]
    assert result[0].commands == [c1, c2]
    assert result[1].commands == [c3]
    assert len(cats) == 2


def test_categories_returns_copy():
    cats = CommandCategories()
    cats.add_command("x", FakeCommand("a"))
    listed = cats.categories()
    listed.clear()
    assert len(cats.categories()) == 1


def test_visible_commands_skips_hidden():
    visible = FakeCommand("command2")
    category = CommandCategory("2", [FakeCommand("command1", hidden=True), visible])
    assert category.visible_commands() == [visible]


def test_visible_commands_empty_category():
    assert CommandCategory("goo").visible_commands() == []


def test_flag_categories_from_flags_mirrors_command_layout():
    strd = FakeFlag("strd")
    strd1 = FakeFlag("strd1", hidden=True)
    intd = FakeFlag("intd", category="cat1", aliases=["altd1", "altd2"])
    sfd = FakeFlag("sfd", category="cat2", hidden=True)
    mutex = FakeFlag("mutex", category="cat2")

    vfc = flag_categories_from_flags([strd, strd1, intd, sfd, mutex]).visible_categories()
    assert [c.name for c in vfc] == ["", "cat1", "cat2"]
    assert vfc[0].flags() == [strd]
    assert vfc[1].flags() == [intd]
    assert vfc[2].flags() == [mutex]


def test_no_categorised_flags_means_no_categories():
    flags = [FakeFlag("a"), FakeFlag("b")]
    assert flag_categories_from_flags(flags).visible_categories() == []


def test_hidden_categorised_flag_does_not_create_category():
    flags = [FakeFlag("a"), FakeFlag("b", category="cat1", hidden=True)]
    assert flag_categories_from_flags(flags).visible_categories() == []


def test_non_categorisable_flags_are_ignored():
    flags = [PlainThing(), FakeFlag("x", category="cat1")]
    vfc = flag_categories_from_flags(flags).visible_categories()
    assert [c.name for c in vfc] == ["cat1"]


def test_flags_sorted_by_string_form_and_hidden_excluded():
    zeta, alpha, gone = FakeFlag("zeta"), FakeFlag("alpha"), FakeFlag("gone", hidden=True)
    categories = FlagCategories()
    for flag in (zeta, gone, alpha):
        categories.add_flag("cat1", flag)
    (only,) = categories.visible_categories()
    assert only.name == "cat1"
    assert only.flags() == [alpha, zeta]


def test_visible_categories_sorted_by_name():
    categories = FlagCategories()
    for name in ("cat2", "", "cat1"):
        categories.add_flag(name, FakeFlag(f"f{name}"))
    assert [c.name for c in categories.visible_categories()] == sorted(["cat2", "", "cat1"])


def test_same_string_form_replaces_flag():
    first, second = FakeFlag("dup"), FakeFlag("dup", category="other")
    categories = FlagCategories()
    categories.add_flag("cat1", first)
    categories.add_flag("cat1", second)
    assert categories.visible_categories()[0].flags() == [second]