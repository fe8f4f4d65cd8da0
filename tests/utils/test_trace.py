from types import SimpleNamespace

from pychip8.utils.trace import TraceRecorder


def _state(pc: int, **kwargs):
    values = {"i": 0x0000, "sp": 0, "v": bytes(16), "delay_timer": 0, "sound_timer": 0}
    values.update(kwargs)
    return SimpleNamespace(pc=pc, **values)


def test_trace_recorder_overwrites_old_entries():
    recorder = TraceRecorder(capacity=2)

    recorder.record_step(_state(0x200), 0x6A42, mnemonic="LD")
    recorder.record_step(_state(0x202, i=0x300), 0xA300, mnemonic="LD")
    recorder.record_step(_state(0x204, sp=1), 0x2400, mnemonic="CALL", note="nested")

    lines = list(recorder.format_entries())
    assert len(recorder) == 2
    assert len(lines) == 2
    assert "pc=0202" in lines[0]
    assert "I=0300" in lines[0]
    assert "pc=0204" in lines[1]
    assert "note=nested" in lines[1]
    assert recorder.last_entry().mnemonic == "CALL"


def test_trace_recorder_formats_registers_and_missing_opcode():
    recorder = TraceRecorder(1)
    registers = bytes(range(16))
    recorder.record_step(_state(0x200, v=registers, delay_timer=3), None)

    lines = list(recorder.format_entries())
    assert "opcode=----" in lines[0]
    assert "V=[00 01 02 03" in lines[0]
    assert "DT=03" in lines[0]


def test_trace_recorder_limit_and_clear():
    recorder = TraceRecorder(4)
    for offset in range(4):
        recorder.record_step(_state(0x200 + offset * 2), 0x0000)

    assert [entry.pc for entry in recorder.entries(2)] == [0x204, 0x206]

    recorder.clear()
    assert recorder.last_entry() is None
    assert list(recorder.entries()) == []
