import pytest

from mwscript.errors import (
    CompiledSizeMismatchError,
    DuplicateFieldError,
    DuplicateHeaderFieldError,
    MalformedFieldError,
    MissingHeaderFieldError,
    RecordError,
    VariableCountMismatchError,
    WrongRecordKindError,
)
from mwscript.models.records import Record, RecordHeader
from mwscript.parser.record_reader import iter_records
from mwscript.parser.script_parser import parse_all_scripts, parse_script

from plugin_builder import (
    craft_blacksmith_bytecode,
    field,
    plugin,
    record,
    schd,
    script_fields,
    script_record,
)


def _record(fields: list[tuple[str, bytes]], sig: str = "SCPT") -> Record:
    payload = b"".join(field(s, d) for s, d in fields)
    return Record(
        header=RecordHeader(type=sig, data_size=len(payload), reserved=0, flags=0),
        payload=payload,
    )


def test_parse_script_with_locals_and_text():
    bytecode = craft_blacksmith_bytecode()
    rec = _record(script_fields(
        "CraftBlacksmith",
        shorts=("state", "count"),
        longs=("gold",),
        floats=("timer",),
        bytecode=bytecode,
        text="Begin CraftBlacksmith\r\nEnd",
    ))
    script = parse_script(rec)

    assert script.name == "CraftBlacksmith"
    assert script.var_counts.shorts == 2
    assert script.var_counts.longs == 1
    assert script.var_counts.floats == 1
    assert script.var_counts.total == 4
    assert script.variable_names == ["state", "count", "gold", "timer"]
    assert script.shorts == ["state", "count"]
    assert script.longs == ["gold"]
    assert script.floats == ["timer"]
    assert script.compiled_size == len(bytecode)
    assert script.bytecode == bytecode
    assert script.source_text == "Begin CraftBlacksmith\r\nEnd"
    assert script.text_size == len("Begin CraftBlacksmith\r\nEnd")


def test_parse_script_without_variables_or_text():
    script = parse_script(_record(script_fields("Empty")))
    assert script.variable_names == []
    assert script.bytecode == b""
    assert script.source_text is None
    assert script.text_size == 0


def test_unknown_fields_are_ignored():
    fields = script_fields("A") + [("XXXX", b"\x01\x02")]
    assert parse_script(_record(fields)).name == "A"


def test_wrong_record_kind():
    with pytest.raises(WrongRecordKindError, match="got 'MISC'"):
        parse_script(_record([], sig="MISC"))


def test_missing_header():
    with pytest.raises(MissingHeaderFieldError):
        parse_script(_record([("SCDT", b"")]))


def test_duplicate_header():
    fields = script_fields("A")
    with pytest.raises(DuplicateHeaderFieldError):
        parse_script(_record([fields[0]] + fields))


def test_duplicate_compiled_data():
    fields = script_fields("A") + [("SCDT", b"")]
    with pytest.raises(DuplicateFieldError, match="SCDT"):
        parse_script(_record(fields))


def test_short_header():
    with pytest.raises(MalformedFieldError):
        parse_script(_record([("SCHD", b"\x00" * 40)]))


def test_variable_count_mismatch():
    table = b"state\x00count\x00"
    fields = [("SCHD", schd("A", 3, 0, 0, 0, len(table))), ("SCVR", table), ("SCDT", b"")]
    with pytest.raises(VariableCountMismatchError) as excinfo:
        parse_script(_record(fields))
    assert excinfo.value.declared == 3
    assert excinfo.value.found == 2


def test_variable_table_size_mismatch():
    table = b"state\x00"
    fields = [("SCHD", schd("A", 1, 0, 0, 0, 20)), ("SCVR", table), ("SCDT", b"")]
    with pytest.raises(VariableCountMismatchError, match="SCVR is 6 bytes"):
        parse_script(_record(fields))


def test_missing_variable_table_with_declared_locals():
    fields = [("SCHD", schd("A", 1, 0, 0, 0, 0)), ("SCDT", b"")]
    with pytest.raises(VariableCountMismatchError):
        parse_script(_record(fields))


def test_compiled_size_mismatch():
    fields = [("SCHD", schd("A", 0, 0, 0, 10, 0)), ("SCDT", b"\x01\x01")]
    with pytest.raises(CompiledSizeMismatchError) as excinfo:
        parse_script(_record(fields))
    assert excinfo.value.declared == 10
    assert excinfo.value.found == 2


def test_record_errors_share_a_base():
    fields = [("SCHD", schd("A", 0, 0, 0, 10, 0))]
    with pytest.raises(RecordError):
        parse_script(_record(fields))


def test_bad_script_does_not_stop_the_stream():
    bad = record("SCPT", [("SCHD", schd("Bad", 0, 0, 0, 99, 0)), ("SCDT", b"")])
    data = plugin(bad, script_record("Good"))
    records = list(iter_records(data))

    with pytest.raises(CompiledSizeMismatchError):
        parse_script(records[0])
    assert parse_script(records[1]).name == "Good"


def test_parse_all_scripts():
    data = plugin(script_record("A"), record("MISC", b""), script_record("B", shorts=("x",)))
    scripts = parse_all_scripts(data)
    assert [s.name for s in scripts] == ["A", "B"]
    assert scripts[1].variable_names == ["x"]
