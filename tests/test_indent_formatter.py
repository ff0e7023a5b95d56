from __future__ import annotations

import io
import threading
from datetime import datetime, timedelta, timezone

import pytest

from helpers import blue, debug, error, gray, info, warn
from indentlog.core.attrs import Attr, Kind, Value, any_attr, group, group_value, integer, string, time_attr
from indentlog.core.levels import DEBUG, ERROR, INFO, WARN, Level, LevelVar
from indentlog.core.record import Record
from indentlog.formatters.indent import IndentFormatter, Options
from indentlog.handlers.sink import Sink, SinkWriteError

MOMENT = datetime(2024, 5, 6, 7, 8, 9, 123987)


def _formatter(level: int = DEBUG) -> tuple[IndentFormatter, io.BytesIO]:
    out = io.BytesIO()
    return IndentFormatter(out, Options(level=level)), out


def _record(message: str = "m", *attrs: Attr, level: int = INFO, time: datetime | None = None) -> Record:
    return Record(time=time, level=Level(level), message=message, attrs=list(attrs))


def test_default_level_is_info() -> None:
    formatter = IndentFormatter(io.BytesIO())
    assert not formatter.enabled(DEBUG)
    assert formatter.enabled(INFO)
    assert formatter.enabled(ERROR)


@pytest.mark.parametrize(
    "minimum, level, expected",
    [
        (INFO, DEBUG, False),
        (INFO, INFO, True),
        (INFO, Level(1), True),
        (WARN, INFO, False),
        (WARN, WARN, True),
        (ERROR, WARN, False),
        (ERROR, Level(12), True),
    ],
)
def test_enabled_boundaries(minimum: Level, level: Level, expected: bool) -> None:
    formatter, _ = _formatter(minimum)
    assert formatter.enabled(level) is expected


def test_enabled_follows_level_var() -> None:
    threshold = LevelVar(ERROR)
    formatter = IndentFormatter(io.BytesIO(), Options(level=threshold))
    child = formatter.with_group("g").with_attrs([integer("a", 1)])
    assert not child.enabled(WARN)
    threshold.set("DEBUG")
    assert child.enabled(DEBUG)


def test_render_time_level_message_without_attrs() -> None:
    formatter, out = _formatter()
    formatter.handle(_record("hello", time=MOMENT))
    assert out.getvalue() == f"{blue('07:08:09.123')} {info()} hello\n".encode()


def test_render_without_time_starts_with_level() -> None:
    formatter, _ = _formatter()
    assert formatter.render(_record("hello")) == f"{info()} hello\n".encode()


@pytest.mark.parametrize(
    "level, rendered",
    [
        (DEBUG, debug()),
        (INFO, info()),
        (WARN, warn()),
        (ERROR, error()),
        (Level(2), "INFO+2".ljust(14)),
        (Level(-6), "DEBUG-2".ljust(14)),
    ],
)
def test_level_padding_and_color(level: Level, rendered: str) -> None:
    formatter, _ = _formatter(Level(-10))
    assert formatter.render(_record("x", level=level)) == f"{rendered} x\n".encode()


def test_record_attributes_are_tab_prefixed_lines() -> None:
    formatter, _ = _formatter()
    output = formatter.render(_record("m", string("user", "ann"), integer("n", 3)))
    assert output == (
        f"{info()} m\n"
        "\t " + gray('user: "ann"') + "\n"
        f"\t {gray('n: 3')}\n"
    ).encode()


def test_value_kinds() -> None:
    formatter, _ = _formatter()
    output = formatter.render(
        _record(
            "m",
            any_attr("ok", True),
            any_attr("ratio", 1.5),
            any_attr("wait", timedelta(seconds=2)),
            time_attr("at", MOMENT),
            any_attr("level", "custom"),
        )
    )
    lines = output.decode().split("\n")
    assert lines[1] == f"\t {gray('ok: true')}"
    assert lines[2] == f"\t {gray('ratio: 1.5')}"
    assert lines[3] == f"\t {gray('wait: 0:00:02')}"
    assert lines[4] == f"\t {blue('07:08:09.123')}"
    assert lines[5] == "\t " + gray('level: "custom"')


def test_reserved_string_keys_are_bare() -> None:
    formatter, _ = _formatter()
    output = formatter.render(_record("m", string("source", "(main.py:10)"), string("msg", "inner")))
    assert output == f"{info()} m\n\t (main.py:10)\n\t inner\n".encode()


def test_named_group_and_inline_group() -> None:
    formatter, _ = _formatter()
    output = formatter.render(
        _record(
            "m",
            group("req", "id", "r1", "n", 2),
            Attr("", group_value(string("a", "x"))),
        )
    )
    assert output == (
        f"{info()} m\n"
        "\t req " + gray('id: "r1"') + " " + gray("n: 2") + "\n"
        "\t  " + gray('a: "x"') + "\n"
    ).encode()


def test_inline_group_separators_stack() -> None:
    formatter, _ = _formatter()
    output = formatter.render(_record("m", Attr("", group_value(integer("a", 1), integer("b", 2)))))
    # The anonymous group writes its own separator before its first member's.
    assert output == f"{info()} m\n\t  {gray('a: 1')} {gray('b: 2')}\n".encode()


def test_zero_attribute_renders_nothing() -> None:
    formatter, _ = _formatter()
    output = formatter.render(_record("m", Attr(), integer("n", 1)))
    assert output == f"{info()} m\n\t\n\t {gray('n: 1')}\n".encode()


def test_empty_groups_render_nothing() -> None:
    formatter, _ = _formatter()
    assert formatter.render(_record("m", group("outer", group("inner")))) == f"{info()} m\n".encode()

    nested = Attr("wrap", Value(Kind.GROUP, ()))
    output = formatter.render(_record("m", group("outer", integer("a", 1)), nested))
    assert output == f"{info()} m\n\t outer {gray('a: 1')}\n".encode()

    child = formatter.with_attrs([Attr("empty", group_value())])
    assert child.render(_record("m")) == f"{info()} m\n".encode()


def test_encoder_skips_empty_group_members() -> None:
    formatter, _ = _formatter()
    outer = Attr("outer", Value(Kind.GROUP, (Attr("e", Value(Kind.GROUP, ())), integer("a", 1))))
    output = formatter.render(_record("m", outer))
    assert output == f"{info()} m\n\t outer {gray('a: 1')}\n".encode()


def test_deferred_value_resolving_to_empty_group_renders_nothing() -> None:
    class Nothing:
        def log_value(self) -> Value:
            return Value(Kind.GROUP, ())

    formatter, _ = _formatter()
    output = formatter.render(_record("m", any_attr("lazy", Nothing())))
    assert output == f"{info()} m\n\t\n".encode()

    nested = group("outer", any_attr("lazy", Nothing()), integer("a", 1))
    output = formatter.render(_record("m", nested))
    assert output == f"{info()} m\n\t outer {gray('a: 1')}\n".encode()

    child = formatter.with_attrs([any_attr("lazy", Nothing())])
    assert child.render(_record("m")) == f"{info()} m\n".encode()


def test_deferred_values_are_resolved() -> None:
    calls: list[int] = []

    class Secret:
        def log_value(self) -> str:
            calls.append(1)
            return "redacted"

    formatter, _ = _formatter()
    output = formatter.render(_record("m", any_attr("token", Secret())))
    assert output == (f"{info()} m\n\t " + gray('token: "redacted"') + "\n").encode()
    assert calls == [1]


def test_with_group_without_attrs_emits_no_header() -> None:
    formatter, _ = _formatter()
    child = formatter.with_group("g")
    assert child.render(_record("m")) == f"{info()} m\n".encode()
    assert child.with_attrs([]) is child


def test_with_group_then_record_attrs_emits_header_in_block() -> None:
    formatter, _ = _formatter()
    child = formatter.with_group("g").with_group("h")
    output = child.render(_record("m", integer("y", 2)))
    assert output == f"{info()} m\ng:\n    h:\n\t {gray('y: 2')}\n".encode()


def test_nested_groups_fold_into_prefix() -> None:
    formatter, _ = _formatter()
    child = formatter.with_group("a").with_group("b").with_attrs([integer("x", 1)])
    output = child.render(_record("m"))
    assert output == f"a:\n    b:\n {gray('x: 1')} {info()} m\n".encode()

    deeper = child.with_group("c")
    output = deeper.render(_record("m", integer("z", 3)))
    assert output == (
        f"a:\n    b:\n {gray('x: 1')} {info()} m\n"
        f"        c:\n"
        f"\t {gray('z: 3')}\n"
    ).encode()


def test_prefix_is_appended_verbatim_after_time() -> None:
    formatter, _ = _formatter()
    child = formatter.with_attrs([string("svc", "api")])
    output = child.render(_record("m", time=MOMENT))
    # The prefix was rendered into an empty buffer, so nothing separates it from the time.
    assert output == (blue("07:08:09.123") + gray('svc: "api"') + f" {info()} m\n").encode()


def test_empty_group_name_is_ignored() -> None:
    formatter, _ = _formatter()
    assert formatter.with_group("") is formatter


def test_derivation_does_not_change_parent() -> None:
    formatter, _ = _formatter()
    parent = formatter.with_group("p").with_attrs([integer("a", 1)])
    record = _record("m", integer("r", 1), time=MOMENT)
    before = parent.render(record)

    parent.with_attrs([integer("b", 2)])
    parent.with_group("q")
    parent.with_group("q").with_attrs([integer("c", 3)])

    assert parent.render(record) == before


def test_siblings_do_not_share_prefix() -> None:
    formatter, _ = _formatter()
    base = formatter.with_attrs([integer("a", 1)])
    left = base.with_attrs([integer("l", 1)])
    right = base.with_attrs([integer("r", 2)])
    assert b"r: 2" not in left.render(_record("m"))
    assert b"l: 1" not in right.render(_record("m"))


def test_front_attribute_is_hoisted_and_still_listed() -> None:
    formatter, _ = _formatter()
    output = formatter.render(_record("m", string("front", "[tag]"), string("front", "[other]")))
    assert output == f"[tag] {info()} m\n\t [tag]\n\t [other]\n".encode()


def test_front_attribute_after_time() -> None:
    formatter, _ = _formatter()
    output = formatter.render(_record("m", string("front", "[tag]"), time=MOMENT))
    assert output.startswith(f"{blue('07:08:09.123')} [tag] {info()} m\n".encode())


def test_empty_front_value_is_not_hoisted() -> None:
    formatter, _ = _formatter()
    output = formatter.render(_record("m", string("front", "")))
    assert output == f"{info()} m\n\t \n".encode()


def test_aware_time_is_rendered_in_local_time() -> None:
    formatter, _ = _formatter()
    aware = datetime(2024, 5, 6, 7, 8, 9, 500000, tzinfo=timezone.utc)
    local = aware.astimezone()
    output = formatter.render(_record("m", time=aware))
    assert output.startswith(blue(f"{local:%H:%M:%S}.500").encode())


def test_handle_does_not_filter() -> None:
    formatter, out = _formatter(ERROR)
    formatter.handle(_record("quiet", level=DEBUG))
    assert out.getvalue().endswith(b" quiet\n")


def test_write_failure_raises_sink_write_error() -> None:
    class Broken:
        def write(self, data: bytes) -> int:
            raise OSError("disk full")

    formatter = IndentFormatter(Broken())
    with pytest.raises(SinkWriteError) as excinfo:
        formatter.handle(_record("m"))
    assert isinstance(excinfo.value.__cause__, OSError)
    # The formatter stays usable after a failed write.
    with pytest.raises(SinkWriteError):
        formatter.handle(_record("again"))


def test_flush_failure_is_reported_as_flush() -> None:
    class Unflushable:
        def __init__(self) -> None:
            self.data = bytearray()

        def write(self, data: bytes) -> int:
            self.data += data
            return len(data)

        def flush(self) -> None:
            raise OSError("pipe closed")

    out = Unflushable()
    formatter = IndentFormatter(out)
    with pytest.raises(SinkWriteError, match="flush") as excinfo:
        formatter.handle(_record("m"))
    assert "write" not in str(excinfo.value)
    assert bytes(out.data).endswith(b" m\n")


def test_derived_formatters_share_sink() -> None:
    out = io.BytesIO()
    sink = Sink(out)
    formatter = IndentFormatter(sink)
    child = formatter.with_group("g").with_attrs([integer("a", 1)])
    assert child.sink is sink
    child.handle(_record("one"))
    formatter.handle(_record("two"))
    assert out.getvalue().count(b"\n") >= 2


def test_concurrent_writes_are_not_interleaved() -> None:
    class SlowWriter:
        def __init__(self) -> None:
            self.data = bytearray()

        def write(self, data: bytes) -> int:
            for index in range(0, len(data), 7):
                self.data += data[index : index + 7]
            return len(data)

    writer = SlowWriter()
    root = IndentFormatter(writer, Options(level=DEBUG))
    workers = 6
    per_worker = 40
    expected: list[bytes] = []

    def run(worker: int) -> None:
        formatter = root.with_group("worker").with_attrs([integer("id", worker)])
        for index in range(per_worker):
            formatter.handle(_record(f"w{worker}-{index}", integer("index", index)))

    for worker in range(workers):
        formatter = root.with_group("worker").with_attrs([integer("id", worker)])
        for index in range(per_worker):
            expected.append(formatter.render(_record(f"w{worker}-{index}", integer("index", index))))

    threads = [threading.Thread(target=run, args=(worker,)) for worker in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    output = bytes(writer.data)
    assert len(output) == sum(len(chunk) for chunk in expected)
    remaining = set(expected)
    position = 0
    while position < len(output):
        match = next(chunk for chunk in remaining if output.startswith(chunk, position))
        remaining.remove(match)
        position += len(match)
    assert not remaining
