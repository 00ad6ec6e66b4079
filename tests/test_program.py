import pytest

from tinybasic.ast import Line, PrintStatement, StringLiteral
from tinybasic.errors import IllegalLineNumber
from tinybasic.program import MAX_LINES, Program


def line(number, text):
    return Line(number, PrintStatement([StringLiteral(text)]), f'{number} PRINT "{text}"')


def test_set_and_get():
    program = Program()
    program.set(line(10, "X"))

    assert program.get(10) == line(10, "X")
    assert program.get(20) is None


def test_set_overwrites():
    program = Program()
    program.set(line(10, "A"))
    program.set(line(10, "B"))

    assert program.count() == 1
    assert program.get(10).source == '10 PRINT "B"'


def test_out_of_range_lookup_is_none():
    program = Program()

    assert program.get(-1) is None
    assert program.get(MAX_LINES) is None


@pytest.mark.parametrize("number", [None, -1, MAX_LINES, 99999])
def test_set_rejects_numbers_outside_address_space(number):
    with pytest.raises(IllegalLineNumber):
        Program().set(Line(number, PrintStatement([]), ""))


def test_iteration_is_ascending_and_restartable():
    program = Program()
    for number in (30, 10, 20):
        program.set(line(number, str(number)))

    assert [l.number for l in program] == [10, 20, 30]
    assert [l.number for l in program] == [10, 20, 30]


def test_len_is_the_address_space():
    assert len(Program()) == MAX_LINES
    assert len(Program(max_lines=100)) == 100


def test_clear():
    program = Program()
    program.set(line(10, "X"))
    program.clear()

    assert program.count() == 0
    assert list(program) == []


def test_print_renders_source_in_order():
    program = Program()
    program.set(line(20, "Y"))
    program.set(line(10, "X"))

    assert program.print() == '10 PRINT "X"\n20 PRINT "Y"'
