"""
Test local image storage.
"""

import os

import pytest

from chart_renderer import ChartRenderer
from error_handler import OutputError
from image_sink import LocalImageSink, prepare_output_directory, write_atomically


class TestFileHelpers:
    def test_prepare_creates_chain(self, tmp_path):
        target = tmp_path / "x" / "y"
        created = prepare_output_directory(str(target))
        assert target.is_dir()
        assert created == [str(target), str(tmp_path / "x")]

    def test_prepare_existing_directory(self, tmp_path):
        assert prepare_output_directory(str(tmp_path)) == []

    def test_prepare_failure_leaves_nothing(self, tmp_path):
        blocker = tmp_path / "file.txt"
        blocker.write_text("data")
        with pytest.raises(OutputError):
            prepare_output_directory(str(blocker / "inner"))
        assert sorted(os.listdir(tmp_path)) == ["file.txt"]

    def test_write_atomically(self, tmp_path):
        path = tmp_path / "out.bin"
        write_atomically(str(path), b"abc")
        assert path.read_bytes() == b"abc"
        assert os.listdir(tmp_path) == ["out.bin"]

    def test_write_into_missing_directory_fails(self, tmp_path):
        with pytest.raises(OutputError):
            write_atomically(str(tmp_path / "missing" / "out.bin"), b"abc")


class TestLocalImageSink:
    def test_allocate_unique_names(self, tmp_path):
        sink = LocalImageSink(str(tmp_path), "/graphs")
        first, second = sink.allocate(), sink.allocate()
        assert first != second
        assert os.path.dirname(first) == str(tmp_path)
        assert os.path.basename(first).startswith("graph_")
        assert first.endswith(".png")

    def test_allocate_named(self, tmp_path):
        sink = LocalImageSink(str(tmp_path), "/graphs")
        assert sink.allocate("chart.png") == os.path.join(str(tmp_path), "chart.png")

    def test_reference_inside_base_dir(self, tmp_path):
        sink = LocalImageSink(str(tmp_path), "/storage/graphs/")
        assert sink.reference(str(tmp_path / "a.png")) == "/storage/graphs/a.png"

    def test_reference_outside_base_dir(self, tmp_path):
        sink = LocalImageSink(str(tmp_path / "graphs"), "/graphs")
        reference = sink.reference(str(tmp_path / "elsewhere.png"))
        assert reference.startswith("file://")
        assert reference.endswith("elsewhere.png")

    def test_store_in_memory_image(self, tmp_path):
        sink = LocalImageSink(str(tmp_path / "graphs"), "/graphs")
        image = ChartRenderer().render([1.0, 2.0, 3.0])

        path = sink.store(image, "stored.png")

        assert os.path.exists(path)
        assert image.path == path
        with open(path, "rb") as handle:
            assert handle.read() == image.data

    def test_list_graphs(self, tmp_path):
        sink = LocalImageSink(str(tmp_path), "/graphs")
        (tmp_path / "old.png").write_bytes(b"1")
        (tmp_path / "new.png").write_bytes(b"2")
        (tmp_path / "notes.txt").write_text("skip")
        os.utime(tmp_path / "old.png", (1000, 1000))
        os.utime(tmp_path / "new.png", (2000, 2000))

        graphs = sink.list_graphs()

        assert [graph["url"] for graph in graphs] == ["/graphs/new.png", "/graphs/old.png"]
        assert graphs[0]["created_at"] == 2000

    def test_list_graphs_missing_directory(self, tmp_path):
        assert LocalImageSink(str(tmp_path / "none"), "/graphs").list_graphs() == []
