import io
import json

from rich.console import Console

from tifgen.reporting import (
    JsonLinesReporter,
    PlainReporter,
    RichReporter,
    TaskStatus,
    set_verbosity,
)


def test_jsonl_emits_summary_events():
    stream = io.StringIO()
    rep = JsonLinesReporter(stream=stream)
    rep.status("Layout summary: format=dxt1 mips=5 total_length=2853")
    events = [json.loads(line) for line in stream.getvalue().splitlines()]
    summary = events[0]
    assert summary["event"] == "summary"
    assert summary["summary_type"] == "layout"
    assert summary["mips"] == "5"
    assert events[1]["event"] == "status"


def test_jsonl_task_lifecycle():
    stream = io.StringIO()
    rep = JsonLinesReporter(stream=stream)
    rep.start_task("write.mips", "Mip levels", total=2)
    rep.advance("write.mips", current_item="64x64")
    rep.end_task("write.mips", levels=2, bytes=2560)
    events = [json.loads(line) for line in stream.getvalue().splitlines()]
    assert [e["event"] for e in events] == ["task_start", "task_progress", "task_end"]
    assert events[-1]["status"] == "success"
    assert events[-1]["levels"] == 2


def test_plain_reporter_lines():
    stream = io.StringIO()
    rep = PlainReporter(stream=stream, use_color=False)
    rep.start_task("t", "Mip levels", total=1)
    rep.advance("t", current_item="16x16")
    rep.end_task("t", TaskStatus.FAILED, levels=1)
    rep.warning("careful")
    rep.verbose("hidden")
    set_verbosity(1)
    rep.verbose("shown")
    text = stream.getvalue()
    assert "Mip levels: 16x16 (1/1)" in text
    assert "✖ Mip levels 1/1" in text and "[levels=1]" in text
    assert "WARN: careful" in text
    assert "hidden" not in text
    assert "VERB1: shown" in text


def test_rich_reporter_prints_brackets_verbatim():
    stream = io.StringIO()
    console = Console(file=stream, force_terminal=False, color_system=None, width=200)
    rep = RichReporter(console=console)
    rep.status("Write summary: file=[bold]mech[/bold].tif")
    rep.error("E_SOURCE_UNSUPPORTED: cannot decode [/] stray.png")
    rep.start_task("t", "Mip levels [ma2]", total=1)
    rep.advance("t", current_item="[64x64]")
    rep.end_task("t", levels=1)
    rep.flush()
    text = stream.getvalue()
    assert "INFO: Write summary: file=[bold]mech[/bold].tif" in text
    assert "ERROR: E_SOURCE_UNSUPPORTED: cannot decode [/] stray.png" in text
    assert "Mip levels [ma2] 1/1" in text
