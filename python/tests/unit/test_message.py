"""
Tests for MIDI message decoding.

Tests for MidiMessage including:
- Category and status classification
- Channel message fields
- Zero-velocity Note-On conversion
- System and sysex fields
- Short frame handling
- Text rendering
"""

import pytest

from midiwire.errors import MalformedFrameError
from midiwire.midi import builders
from midiwire.midi.message import ChannelMessage, MidiMessage, SysExMessage, SystemMessage
from midiwire.midi.status import MessageCategory, MidiStatus, classify, status_of
from midiwire.models.codec_config import CodecConfig


class TestClassification:
    """Test category and status classification of the first byte."""

    def test_sysex_start_byte(self):
        """Test that 0xF0 classifies as system exclusive."""
        assert classify(0xF0) is MessageCategory.SYSTEM_EXCLUSIVE

    @pytest.mark.parametrize('first_byte', [0xF1, 0xF2, 0xF6, 0xF7, 0xF8, 0xFE, 0xFF])
    def test_system_bytes(self, first_byte):
        """Test classification of system status bytes."""
        assert classify(first_byte) is MessageCategory.SYSTEM
        assert status_of(first_byte) == first_byte

    @pytest.mark.parametrize('first_byte', [0x80, 0x9F, 0xB3, 0xEF])
    def test_channel_bytes(self, first_byte):
        """Test classification of channel status bytes."""
        assert classify(first_byte) is MessageCategory.CHANNEL
        assert status_of(first_byte) == first_byte & 0xF0

    def test_from_bytes_picks_variant(self):
        """Test that from_bytes() picks the class for the category."""
        assert isinstance(MidiMessage.from_bytes([0x90, 60, 100]), ChannelMessage)
        assert isinstance(MidiMessage.from_bytes([0xF8]), SystemMessage)
        assert isinstance(MidiMessage.from_bytes([0xF0, 0x43, 0x10, 0xF7]), SysExMessage)

    def test_empty_frame_rejected(self):
        """Test that an empty frame raises MalformedFrameError."""
        with pytest.raises(MalformedFrameError):
            MidiMessage.from_bytes(b'')


class TestChannelMessage:
    """Test channel message field extraction."""

    def test_note_on_round_trip_all_channels_and_notes(self):
        """Test Note-On fields on every channel and note."""
        for channel in range(16):
            for note in range(128):
                message = MidiMessage.from_bytes(builders.note_on(channel, note, 100))
                assert message.category is MessageCategory.CHANNEL
                assert message.status == MidiStatus.NOTE_ON
                assert message.channel == channel
                assert message.note == note
                assert message.velocity == 100

    def test_pitch_bend_round_trip(self):
        """Test pitch bend values across the full range."""
        for value in (-8192, -8191, -1, 0, 1, 4096, 8191):
            message = MidiMessage.from_bytes(builders.pitch_bend(3, value))
            assert message.pitch_bend == value
            assert message.channel == 3

    def test_pitch_bend_raw_bytes(self):
        """Test pitch bend decoding from raw bytes."""
        message = MidiMessage.from_bytes([0xE0, 0x00, 0x40])
        assert message.pitch_bend == 0
        assert MidiMessage.from_bytes([0xE0, 0x7F, 0x7F]).pitch_bend == 8191
        assert MidiMessage.from_bytes([0xE0, 0x00, 0x00]).pitch_bend == -8192

    def test_control_change_fields(self):
        """Test control change fields."""
        message = MidiMessage.from_bytes([0xB5, 64, 127])
        assert message.status == MidiStatus.CONTROL_CHANGE
        assert message.channel == 5
        assert message.controller == 64
        assert message.value == 127
        assert not message.is_channel_mode

    def test_channel_mode_message(self):
        """Test detecting channel mode messages."""
        message = MidiMessage.from_bytes([0xB0, 123, 0])
        assert message.is_channel_mode

    def test_program_change(self):
        """Test the program change field."""
        message = MidiMessage.from_bytes(builders.program_change(9, 42))
        assert message.data == bytes([0xC9, 42])
        assert message.program == 42

    def test_pressure(self):
        """Test pressure for channel and key pressure."""
        assert MidiMessage.from_bytes([0xD0, 77]).pressure == 77
        assert MidiMessage.from_bytes([0xA0, 60, 33]).pressure == 33

    def test_with_channel(self):
        """Test readdressing a message to another channel."""
        message = MidiMessage.from_bytes([0x90, 60, 100], timestamp=5.0)
        moved = message.with_channel(7)
        assert moved.data == bytes([0x97, 60, 100])
        assert moved.timestamp == 5.0
        assert message.data == bytes([0x90, 60, 100])

    def test_timestamp(self):
        """Test the capture timestamp."""
        assert MidiMessage.from_bytes([0x90, 60, 1], timestamp=12.5).timestamp == 12.5
        assert MidiMessage.from_bytes([0x90, 60, 1]).timestamp > 0


class TestZeroVelocityConversion:
    """Test the Note-On velocity 0 to Note-Off rewrite."""

    def test_converted_by_default(self):
        """Test that a zero-velocity Note-On becomes a Note-Off."""
        message = MidiMessage.from_bytes([0x93, 60, 0])
        assert message.status == MidiStatus.NOTE_OFF
        assert message.channel == 3
        assert message.data == bytes([0x83, 60, 0])

    def test_disabled_by_config(self):
        """Test that the conversion can be turned off."""
        config = CodecConfig(convert_zero_velocity_note_on=False)
        message = MidiMessage.from_bytes([0x93, 60, 0], config=config)
        assert message.status == MidiStatus.NOTE_ON

    def test_nonzero_velocity_untouched(self):
        """Test that Note-On with velocity is kept."""
        assert MidiMessage.from_bytes([0x90, 60, 1]).status == MidiStatus.NOTE_ON

    def test_input_buffer_not_modified(self):
        """Test that conversion does not modify the input buffer."""
        raw = bytearray([0x90, 60, 0])
        MidiMessage.from_bytes(raw)
        assert raw == bytearray([0x90, 60, 0])


class TestShortFrames:
    """Reading a field past the end of a frame is a hard error."""

    def test_velocity_of_two_byte_frame(self):
        """Test reading velocity from a two-byte frame."""
        message = MidiMessage.from_bytes([0x90, 60])
        assert not message.is_complete
        assert message.note == 60
        with pytest.raises(MalformedFrameError):
            _ = message.velocity

    def test_pitch_bend_of_short_frame(self):
        """Test reading pitch bend from a short frame."""
        with pytest.raises(MalformedFrameError):
            _ = MidiMessage.from_bytes([0xE0, 0x10]).pitch_bend

    def test_status_only_frame(self):
        """Test a frame with only a status byte."""
        message = MidiMessage.from_bytes([0xC0])
        assert message.channel == 0
        with pytest.raises(MalformedFrameError):
            _ = message.program

    def test_complete_frames(self):
        """Test is_complete for full-length frames."""
        assert MidiMessage.from_bytes([0xC0, 1]).is_complete
        assert MidiMessage.from_bytes([0xF8]).is_complete
        assert not MidiMessage.from_bytes([0xF2, 1]).is_complete


class TestSystemMessages:
    """Test system common and realtime messages."""

    def test_song_position(self):
        """Test the song position pointer."""
        message = MidiMessage.from_bytes([0xF2, 0x10, 0x02])
        assert message.song_position == 2 * 128 + 0x10

    def test_mtc_quarter_frame(self):
        """Test MTC quarter frame fields."""
        message = MidiMessage.from_bytes([0xF1, 0x35])
        assert message.mtc_type == 3
        assert message.mtc_value == 5

    def test_realtime(self):
        """Test realtime detection."""
        assert MidiMessage.from_bytes([0xF8]).is_realtime
        assert not MidiMessage.from_bytes([0xF3, 1]).is_realtime


class TestSysExMessage:
    """Test manufacturer and device id extraction."""

    def test_single_byte_manufacturer(self):
        """Test a single-byte manufacturer id."""
        message = MidiMessage.from_bytes([0xF0, 0x43, 0x10, 0x4C, 0x00, 0xF7])
        assert message.manufacturer_id == 0x43
        assert message.device_id == 0x10
        assert message.body == bytes([0x4C, 0x00])

    def test_extended_manufacturer(self):
        """Test a three-byte manufacturer id."""
        message = MidiMessage.from_bytes([0xF0, 0x00, 0x20, 0x29, 0x02, 0x11, 0xF7])
        assert message.is_extended_id
        assert message.manufacturer_id == (0x00, 0x20, 0x29)
        assert message.device_id == 0x02
        assert message.body == bytes([0x11])

    def test_device_id_missing(self):
        """Test reading a missing device id."""
        message = MidiMessage.from_bytes([0xF0, 0x43])
        with pytest.raises(MalformedFrameError):
            _ = message.device_id

    def test_validate(self):
        """Test matching a sysex message against a pattern."""
        message = MidiMessage.from_bytes([0xF0, 0x43, 0x10, 0x4C, 0xF7])
        assert message.validate(0x43, 0x10, [0x4C])
        assert not message.validate(0x41)


class TestRendering:
    """Test human-readable text."""

    def test_note_on(self):
        """Test rendering a Note-On."""
        assert str(MidiMessage.from_bytes([0x90, 60, 100])) == 'NoteOn (Ch. 1, Note: C4 (60), Velocity: 100)'

    def test_control_change_with_name(self):
        """Test rendering a named controller."""
        text = str(MidiMessage.from_bytes([0xB1, 64, 127]))
        assert text == 'ControlChange (Ch. 2, Number: 64 / SUSTAIN_PEDAL_SWITCH, Value: 127)'

    def test_channel_mode(self):
        """Test rendering a channel mode message."""
        assert str(MidiMessage.from_bytes([0xB0, 123, 0])).startswith('ChannelMode (Ch. 1')

    def test_pitch_bend(self):
        """Test rendering pitch bend."""
        assert str(MidiMessage.from_bytes([0xE0, 0, 0x40])) == 'PitchBend (Ch. 1, Value: 0, LSB: 0, MSB: 64)'

    def test_system(self):
        """Test rendering system messages."""
        assert str(MidiMessage.from_bytes([0xF3, 4])) == 'SongSelect (song: 4)'
        assert str(MidiMessage.from_bytes([0xF8])) == 'TimingClock'

    def test_sysex_dump_truncated(self):
        """Test that long sysex dumps are truncated."""
        text = str(MidiMessage.from_bytes([0xF0] + [0x01] * 100 + [0xF7]))
        assert text.startswith('SystemExclusive (length: 102)')
        assert text.endswith('...')
        assert text.count('\n') == 9

    def test_out_of_range_note_rendered_as_number(self):
        """Test that a note byte above 127 renders as its raw value."""
        assert str(MidiMessage.from_bytes([0x90, 0xC8, 0x40])) == 'NoteOn (Ch. 1, Note: 200, Velocity: 64)'
        assert str(MidiMessage.from_bytes([0xA0, 0x80, 0x10])) == 'KeyPressure (Ch. 1, Note: 128, Pressure: 16)'
