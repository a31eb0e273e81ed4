"""
Note Model

MIDI note numbers and their names, e.g. 60 <-> 'C4'.
"""

from dataclasses import dataclass

# Note name lookup table (sharps only)
SHARP_NOTATIONS = ['C', 'C#', 'D', 'D#', 'E', 'F', 'F#', 'G', 'G#', 'A', 'A#', 'B']


@dataclass(frozen=True)
class NoteObject:
    """A note as notation plus octave. Octave -1 holds MIDI note 0."""
    notation: str
    octave: int

    @classmethod
    def from_midi(cls, number: int) -> 'NoteObject':
        """Create a note from a MIDI note number (0-127)"""
        if not 0 <= number <= 127:
            raise ValueError(f"MIDI note number must be 0-127, got {number}")
        return cls(notation=SHARP_NOTATIONS[number % 12], octave=(number // 12) - 1)

    @classmethod
    def parse(cls, note_str: str) -> 'NoteObject':
        """Parse a note string like 'C4', 'C#4' or 'C-1'"""
        if len(note_str) >= 2 and note_str[1] == '#':
            notation, octave = note_str[:2], note_str[2:]
        else:
            notation, octave = note_str[:1], note_str[1:]
        if notation not in SHARP_NOTATIONS:
            raise ValueError(f"Unknown note notation: {note_str!r}")
        try:
            return cls(notation=notation, octave=int(octave))
        except ValueError:
            raise ValueError(f"Invalid octave in note: {note_str!r}") from None

    def to_midi(self) -> int:
        """Convert to MIDI note number"""
        return (self.octave + 1) * 12 + SHARP_NOTATIONS.index(self.notation)

    def __str__(self) -> str:
        return f"{self.notation}{self.octave}"


def note_name(number: int) -> str:
    """Name of a MIDI note number, e.g. note_name(60) == 'C4'"""
    return str(NoteObject.from_midi(number))
