"""Tests for the colony file loader and its diagnostics."""

import textwrap

import pytest

from colony.errors import ColonyFileFormatError, InvalidArgumentError, InvalidStatementError
from colony.reader import Section, can_follow, iter_statements, parse_colony, read_colony

CORRECT = textwrap.dedent(
    """\
    colon(Dark Vador).
    colon(Dartagnan).
    colon(Zoooooo).
    colon(Tartatin).
    ressource(Pomme).
    ressource(Big Mac).
    ressource(Tarte au citron).
    ressource(Orange).
    deteste(Dark Vador,Dartagnan).
    deteste(Dark Vador,Zoooooo).
    deteste(Dark Vador,Tartatin).
    preferences(Dark Vador,Big Mac,Tarte au citron,Orange,Pomme).
    preferences(Dartagnan,Big Mac,Orange,Tarte au citron,Pomme).
    preferences(Tartatin,Pomme,Tarte au citron,Big Mac,Orange).
    preferences(Zoooooo,Pomme,Big Mac,Orange,Tarte au citron).
    """
)


def _replace_line(number, replacement):
    lines = CORRECT.splitlines()
    lines[number - 1] = replacement
    return "\n".join(lines) + "\n"


def test_section_order():
    assert can_follow(None, Section.SETTLERS)
    assert can_follow(Section.SETTLERS, Section.RESOURCES)
    assert can_follow(Section.RESOURCES, Section.ADVERSARIES)
    assert can_follow(Section.RESOURCES, Section.PREFERENCES)
    assert can_follow(Section.ADVERSARIES, Section.PREFERENCES)
    assert not can_follow(Section.SETTLERS, Section.PREFERENCES)
    assert not can_follow(Section.PREFERENCES, Section.ADVERSARIES)
    assert not can_follow(Section.PREFERENCES, Section.PREFERENCES)
    assert not can_follow(None, Section.RESOURCES)


def test_iter_statements_tracks_lines():
    text = "colon(A).\n\n  colon(B).colon(C).\n"
    assert list(iter_statements(text)) == [(1, "colon(A)"), (3, "colon(B)"), (3, "colon(C)")]


def test_parse_correct_colony():
    simulation = parse_colony(CORRECT)
    assert [s.name for s in simulation.settlers] == ["Dark Vador", "Dartagnan", "Zoooooo", "Tartatin"]
    assert [r.name for r in simulation.resources] == ["Pomme", "Big Mac", "Tarte au citron", "Orange"]
    assert simulation.settler("Dark Vador").adversaries == {"Dartagnan", "Zoooooo", "Tartatin"}
    assert simulation.settler("Tartatin").adversaries == {"Dark Vador"}
    assert [r.name for r in simulation.settler("Dartagnan").preferences] == [
        "Big Mac",
        "Orange",
        "Tarte au citron",
        "Pomme",
    ]
    assert simulation.check_stable() is True


def test_adversary_section_is_optional():
    text = "colon(A).colon(B).ressource(R1).ressource(R2).preferences(A,R1,R2).preferences(B,R2,R1)."
    simulation = parse_colony(text)
    assert simulation.settler("A").adversaries == set()


def test_missing_terminator_is_reported_on_its_line():
    with pytest.raises(InvalidStatementError) as err:
        parse_colony(_replace_line(4, "colon(Tartatin)"))
    assert err.value.line == 4


def test_unknown_statement():
    with pytest.raises(InvalidStatementError) as err:
        parse_colony(_replace_line(10, "hello(Dark Vador,Zoooooo)."))
    assert err.value.line == 10
    assert "At line 10" in str(err.value)


def test_invalid_argument():
    with pytest.raises(InvalidArgumentError) as err:
        parse_colony(_replace_line(5, "ressource(Pomme, 1, 2, 4)."))
    assert err.value.line == 5


def test_statement_out_of_order():
    with pytest.raises(ColonyFileFormatError, match="should not be there") as err:
        parse_colony(_replace_line(12, "colon(Intruder)."))
    assert err.value.line == 12


def test_resources_before_settlers():
    with pytest.raises(ColonyFileFormatError, match="Settlers should be defined first") as err:
        parse_colony("ressource(Pomme).\ncolon(A).\n")
    assert err.value.line == 1


def test_empty_file():
    with pytest.raises(ColonyFileFormatError, match="Settlers should be defined first"):
        parse_colony("\n\n")


def test_resource_count_mismatch():
    with pytest.raises(ColonyFileFormatError, match="Number of resources must equal number of settlers"):
        parse_colony(_replace_line(8, ""))


def test_preferences_argument_count():
    with pytest.raises(ColonyFileFormatError, match="Missing 1 argument") as err:
        parse_colony(_replace_line(13, "preferences(Dartagnan,Big Mac,Orange,Tarte au citron)."))
    assert err.value.line == 13
    with pytest.raises(ColonyFileFormatError, match="Extra 1 argument"):
        parse_colony(_replace_line(13, "preferences(Dartagnan,Big Mac,Orange,Tarte au citron,Pomme,Pomme)."))


def test_unknown_names_are_reported_with_line():
    with pytest.raises(ColonyFileFormatError, match="Settler 'Nobody' does not exist") as err:
        parse_colony(_replace_line(9, "deteste(Dark Vador,Nobody)."))
    assert err.value.line == 9
    with pytest.raises(ColonyFileFormatError, match="Resource 'Kiwi' does not exist"):
        parse_colony(_replace_line(14, "preferences(Tartatin,Kiwi,Tarte au citron,Big Mac,Orange)."))


def test_self_adversary_is_reported():
    with pytest.raises(ColonyFileFormatError, match="own adversary") as err:
        parse_colony(_replace_line(9, "deteste(Dark Vador,Dark Vador)."))
    assert err.value.line == 9


def test_duplicate_settler():
    with pytest.raises(ColonyFileFormatError, match="Duplicate settler") as err:
        parse_colony(_replace_line(2, "colon(Dark Vador)."))
    assert err.value.line == 2


def test_incomplete_preferences_are_unstable():
    with pytest.raises(ColonyFileFormatError, match="not stable"):
        parse_colony(_replace_line(15, ""))
    with pytest.raises(ColonyFileFormatError, match="not stable"):
        parse_colony(_replace_line(15, "preferences(Zoooooo,Pomme,Pomme,Orange,Tarte au citron)."))


def test_read_colony_from_disk(tmp_path):
    path = tmp_path / "colony.txt"
    path.write_text(CORRECT, encoding="utf-8")
    assert len(read_colony(path)) == 4
