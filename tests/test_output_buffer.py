"""
Output buffer tests

Tests ambient output routing, buffer start/stop preconditions, LIFO
release and guaranteed release on error paths.
"""

import pytest

from platecraft.lib.output import Output
from platecraft.lib.errors import AlreadyActive, BufferOrderError, NotActive, SequencingError


class TestAmbientOutput:
    """Test where ambient writes land"""

    def test_writes_go_to_root_without_buffers(self):
        """Nothing capturing: writes accumulate in the root text"""
        output = Output()
        output.write("<p>")
        output.write("hi")
        output.write("</p>")
        assert output.getvalue() == "<p>hi</p>"
        assert output.depth == 0
        assert output.capturing is False

    def test_none_is_skipped_and_values_are_stringified(self):
        """None writes nothing, other values are converted with str()"""
        output = Output()
        output.write(None)
        output.write(42)
        assert output.getvalue() == "42"

    def test_innermost_buffer_receives_writes(self):
        """Only the innermost active buffer sees a write"""
        output = Output()
        outer = output.buffer_open()
        output.write("outer ")
        inner = output.buffer_open()
        output.write("inner")
        assert inner.stop() == "inner"
        output.write("again")
        assert outer.stop() == "outer again"
        assert output.getvalue() == ""


class TestBufferPreconditions:
    """Test start/stop sequencing errors"""

    def test_start_twice_fails(self):
        """A buffer that is already capturing cannot start again"""
        output = Output()
        buffer = output.buffer_open()
        with pytest.raises(AlreadyActive):
            buffer.start()

    def test_stop_without_start_fails(self):
        """Stopping an inactive buffer is a sequencing error"""
        output = Output()
        buffer = output.buffer()
        with pytest.raises(NotActive):
            buffer.stop()

    def test_stop_twice_fails(self):
        """A stopped buffer cannot be stopped again"""
        output = Output()
        buffer = output.buffer_open()
        buffer.stop()
        with pytest.raises(NotActive):
            buffer.stop()

    def test_out_of_order_stop_fails(self):
        """Releasing an outer buffer while an inner one is open fails"""
        output = Output()
        outer = output.buffer_open()
        output.buffer_open()
        with pytest.raises(BufferOrderError):
            outer.stop()
        assert outer.active is True

    def test_errors_are_sequencing_errors(self):
        """All buffer precondition failures share the sequencing kind"""
        assert issubclass(AlreadyActive, SequencingError)
        assert issubclass(NotActive, SequencingError)
        assert issubclass(BufferOrderError, SequencingError)

    def test_buffer_can_be_restarted_after_stop(self):
        """A stopped buffer starts fresh"""
        output = Output()
        buffer = output.buffer_open()
        output.write("first")
        buffer.stop()
        buffer.start()
        output.write("second")
        assert buffer.stop() == "second"


class TestScopedRelease:
    """Test context manager use and unwinding"""

    def test_context_manager_captures_text(self):
        """Leaving the with block stops the buffer and keeps its text"""
        output = Output()
        with output.buffer() as buffer:
            output.write("captured")
        assert buffer.active is False
        assert buffer.text == "captured"

    def test_context_manager_releases_on_error(self):
        """An exception inside the block still releases the buffer and any inner ones"""
        output = Output()
        with pytest.raises(RuntimeError):
            with output.buffer() as buffer:
                output.buffer_open()
                raise RuntimeError("template failed")
        assert buffer.active is False
        assert output.depth == 0

    def test_unwind_releases_down_to_depth(self):
        """unwind() leaves the requested number of buffers active"""
        output = Output()
        keep = output.buffer_open()
        output.buffer_open()
        output.write("lost")
        output.buffer_open()

        discarded = output.unwind(1)

        assert output.depth == 1
        assert keep.active is True
        assert discarded == ["", "lost"]


class TestCaptureSlot:
    """Test the single capture slot shared by captures and blocks"""

    def test_second_exclusive_buffer_fails(self):
        """Only one capture or block may hold the slot"""
        output = Output()
        outer = output.buffer_open(exclusive=True)
        with pytest.raises(AlreadyActive):
            output.buffer_open(exclusive=True)
        assert output.depth == 1
        assert output.slotHolder is outer

    def test_slot_is_held_below_render_buffers(self):
        """A render buffer opened inside a capture does not free the slot"""
        output = Output()
        output.buffer_open(exclusive=True)
        render = output.buffer_open()
        with pytest.raises(AlreadyActive):
            output.buffer_open(exclusive=True)
        assert output.depth == 2
        render.stop()

    def test_render_buffers_nest_freely(self):
        output = Output()
        output.buffer_open()
        capture = output.buffer_open(exclusive=True)
        output.buffer_open()
        assert output.depth == 3
        assert output.slotHolder is capture

    def test_slot_is_free_after_stop(self):
        output = Output()
        first = output.buffer_open(exclusive=True)
        first.stop()
        assert output.slotHolder is None
        second = output.buffer_open(exclusive=True)
        assert output.slotHolder is second
        assert output.capturing is True
