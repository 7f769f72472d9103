from __future__ import annotations

import logging

import pytest

from tablebind.models import ColumnSpec, MappingError, MatchStrategy, TableConfig, WhitespaceMode
from tablebind.services.resolver import header_name, match_columns, resolve_columns


def _spec(prop: str, *names: str, **kwargs) -> ColumnSpec:
    return ColumnSpec(names=names, property_name=prop, **kwargs)


def _header(*cells: object) -> dict[int, object]:
    return dict(enumerate(cells))


class TestHeaderName:
    def test_uses_processed_text(self):
        table = TableConfig(whitespace_mode=WhitespaceMode.REMOVE_ALL)
        assert header_name(0, " Emp  Id ", table) == "EmpId"

    def test_falls_back_to_letter(self):
        assert header_name(2, None, TableConfig()) == "C"
        assert header_name(27, "", TableConfig()) == "AB"
        assert header_name(1, "Name", TableConfig(has_header=False)) == "B"


class TestMatchColumns:
    def test_index_short_circuits_names(self):
        spec = _spec("code", "Something Else", index=3, match=MatchStrategy.EXACT)
        assert match_columns(3, "Unrelated", [spec]) == [spec]
        assert match_columns(2, "Unrelated", [spec]) == []

    def test_index_excludes_name_matches_elsewhere(self):
        spec = _spec("name", "Name", index=2)
        assert match_columns(0, "Name", [spec]) == []
        assert match_columns(0, "name", [spec]) == []
        assert match_columns(2, "Real", [spec]) == [spec]

    @pytest.mark.parametrize(
        ("strategy", "header", "expected"),
        [
            (MatchStrategy.EXACT, "Name", True),
            (MatchStrategy.EXACT, "name", False),
            (MatchStrategy.IGNORE_CASE, "NAME", True),
            (MatchStrategy.CONTAINS, "Full Name (legal)", True),
            (MatchStrategy.CONTAINS, "full name", False),
            (MatchStrategy.IGNORE_CASE_CONTAINS, "FULL NAME", True),
            (MatchStrategy.PREFIX, "Name of person", True),
            (MatchStrategy.PREFIX, "Full Name", False),
            (MatchStrategy.SUFFIX, "Full Name", True),
            (MatchStrategy.IGNORE_CASE_SUFFIX, "FULL NAME", True),
            (MatchStrategy.SUFFIX, "Name of person", False),
        ],
    )
    def test_name_strategies(self, strategy, header, expected):
        spec = _spec("who", "Name", match=strategy)
        assert bool(match_columns(0, header, [spec])) is expected

    def test_regex(self):
        spec = _spec("year", r"^FY\d{4}$", match=MatchStrategy.REGEX)
        assert match_columns(0, "FY2024", [spec]) == [spec]
        assert match_columns(0, "fy2024", [spec]) == []
        ignore_case = _spec("year", r"^FY\d{4}$", match=MatchStrategy.IGNORE_CASE_REGEX)
        assert match_columns(0, "fy2024", [ignore_case]) == [ignore_case]

    def test_invalid_regex_never_matches(self):
        spec = _spec("broken", "([unclosed", match=MatchStrategy.REGEX)
        assert match_columns(0, "([unclosed", [spec]) == []

    def test_property_name_matches(self):
        spec = _spec("salary", "Pay", match=MatchStrategy.IGNORE_CASE)
        assert match_columns(0, "SALARY", [spec]) == [spec]

    def test_spec_names_are_whitespace_processed(self):
        spec = _spec("emp_id", "Emp Id", match=MatchStrategy.EXACT)
        assert match_columns(0, "EmpId", [spec], WhitespaceMode.REMOVE_ALL) == [spec]

    def test_ignored_and_nameless_specs_never_match(self):
        ignored = _spec("a", "A", ignore_on_read=True)
        nameless = ColumnSpec(names=("A",))
        assert match_columns(0, "A", [ignored, nameless]) == []

    def test_empty_names_do_not_match_everything(self):
        spec = ColumnSpec(names=("  ",), property_name="zzz", match=MatchStrategy.CONTAINS)
        assert match_columns(0, "Anything", [spec], WhitespaceMode.TRIM) == []


class TestResolveColumns:
    def test_basic_resolution(self):
        specs = [_spec("emp_id", "EmpId"), _spec("name", "Name")]
        binding = resolve_columns(_header("Name", "Dept", "EmpId"), specs, TableConfig())
        assert binding.to_dict() == {0: ["name"], 2: ["emp_id"]}
        assert binding.specs_at(2)[0].index == 2
        assert binding.specs_at(1) == ()

    def test_explicit_index_beats_earlier_name_match(self):
        binding = resolve_columns(_header("Name", "x", "Real"), [_spec("name", "Name", index=2)], TableConfig())
        assert binding.to_dict() == {2: ["name"]}

    def test_first_match_per_spec_wins(self):
        binding = resolve_columns(_header("Name", "Name"), [_spec("name", "Name")], TableConfig())
        assert binding.to_dict() == {0: ["name"]}

    def test_fan_out(self):
        specs = [_spec("display", "Name"), _spec("sort_key", "Name")]
        binding = resolve_columns(_header("Name"), specs, TableConfig())
        assert binding.to_dict() == {0: ["display", "sort_key"]}

    def test_missing_required_lists_exactly_those_columns(self, caplog):
        specs = [
            _spec("emp_id", "EmpId", required=True),
            _spec("dept", "Dept", required=True),
            _spec("name", "Name", required=True),
            _spec("phone", "Phone"),
        ]
        with caplog.at_level(logging.ERROR, logger="tablebind.services.resolver"):
            with pytest.raises(MappingError) as e:
                resolve_columns(_header("Name"), specs, TableConfig())
        assert e.value.missing == ("emp_id", "dept")
        assert "emp_id" in str(e.value) and "dept" in str(e.value)
        assert "phone" not in str(e.value)
        assert "required columns" in caplog.text

    def test_required_but_ignored_on_read_is_not_missing(self):
        spec = _spec("emp_id", "EmpId", required=True, ignore_on_read=True)
        assert resolve_columns(_header("Name"), [spec], TableConfig()).is_empty

    def test_is_idempotent(self):
        specs = [_spec("emp_id", "EmpId"), _spec("name", "Name")]
        header = _header("EmpId", "Name")
        first = resolve_columns(header, specs, TableConfig())
        second = resolve_columns(header, specs, TableConfig())
        assert first == second

    def test_no_header_uses_letters_and_indexes(self):
        table = TableConfig(has_header=False)
        specs = [_spec("first", index=0), _spec("third", "C")]
        binding = resolve_columns(_header("7", "x", "y"), specs, table)
        assert binding.to_dict() == {0: ["first"], 2: ["third"]}

    def test_dictionary_mode_adds_unmatched_columns(self):
        specs = [_spec("id", "EmpId")]
        binding = resolve_columns(
            _header("EmpId", "Name", None, "Name"), specs, TableConfig(), dictionary_mode=True
        )
        assert binding.to_dict() == {0: ["id"], 1: ["Name"], 2: ["C"]}

    def test_empty_specs(self):
        assert resolve_columns(_header("A", "B"), [], TableConfig()).is_empty
        assert len(resolve_columns(_header("A", "B"), [], TableConfig(), dictionary_mode=True)) == 2
