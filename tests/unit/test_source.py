"""Tests for input sources."""

import io
import logging

from jqsh.reader import ShellReader
from jqsh.source import FileInput, ProducerInput, command_producer


def test_file_input_opens_file(data_json):
    source = FileInput(str(data_json))
    with source.open() as f:
        assert f.read() == data_json.read_bytes()


def test_release_keeps_regular_file(data_json):
    FileInput(str(data_json)).release()
    assert data_json.exists()


def test_release_deletes_temporary_file(data_json):
    source = FileInput(str(data_json), temporary=True)
    source.release()
    source.release()
    assert not data_json.exists()
    assert source.released


def test_release_missing_temporary_file_warns(tmp_path, caplog):
    source = FileInput(str(tmp_path / "gone.json"), temporary=True)
    source.release()
    assert "removing temporary file" in caplog.text


def test_producer_input_reopens():
    calls = []

    def produce():
        calls.append(1)
        return io.BytesIO(b"{}")

    source = ProducerInput(produce)
    source.open().read()
    source.open().read()
    assert len(calls) == 2


def test_command_producer_streams_stdout(caplog):
    caplog.set_level(logging.INFO)
    produce = command_producer(["sh", "-c", "echo '[1, 2]'"])
    with produce() as stream:
        assert stream.read() == b"[1, 2]\n"
    with produce() as stream:
        assert stream.read() == b"[1, 2]\n"


def test_session_replaces_input(make_session, tmp_path):
    first = tmp_path / "first.json"
    second = tmp_path / "second.json"
    first.write_text("1")
    second.write_text("2")
    session = make_session()

    session.set_input_file(str(first), temporary=True)
    session.set_input_file(str(second), temporary=True)

    assert not first.exists()
    assert second.exists()
    assert session.input_path() == str(second)


def test_session_run_releases_input(make_session, tmp_path):
    temp = tmp_path / "temp.json"
    temp.write_text("{}")
    session = make_session(reader=ShellReader(io.StringIO(""), output=io.StringIO()))
    session.set_input_file(str(temp), temporary=True)

    session.run()

    assert not temp.exists()
    assert not session.alive
