"""
MIDI Controller Numbers

Control-change numbers with standard meanings.
"""

from enum import IntEnum
from typing import Optional


class MidiController(IntEnum):
    BANK_SELECT = 0
    MODULATION_WHEEL = 1
    BREATH_CONTROLLER = 2
    FOOT_CONTROLLER = 4
    PORTAMENTO_TIME = 5
    DATA_ENTRY_MSB = 6
    VOLUME = 7
    BALANCE = 8
    PAN = 10
    EXPRESSION_CONTROLLER = 11
    EFFECT_CONTROL_1 = 12
    EFFECT_CONTROL_2 = 13
    GENERAL_PURPOSE_CONTROLLER_1 = 16
    GENERAL_PURPOSE_CONTROLLER_2 = 17
    GENERAL_PURPOSE_CONTROLLER_3 = 18
    GENERAL_PURPOSE_CONTROLLER_4 = 19

    BANK_SELECT_LSB = 32
    MODULATION_WHEEL_LSB = 33
    BREATH_CONTROLLER_LSB = 34
    FOOT_CONTROLLER_LSB = 36
    PORTAMENTO_TIME_LSB = 37
    DATA_ENTRY_LSB = 38
    VOLUME_LSB = 39
    BALANCE_LSB = 40
    PAN_LSB = 41
    EXPRESSION_CONTROLLER_LSB = 43
    EFFECT_CONTROL_1_LSB = 44
    EFFECT_CONTROL_2_LSB = 45
    GENERAL_PURPOSE_CONTROLLER_1_LSB = 48
    GENERAL_PURPOSE_CONTROLLER_2_LSB = 49
    GENERAL_PURPOSE_CONTROLLER_3_LSB = 50
    GENERAL_PURPOSE_CONTROLLER_4_LSB = 51

    SUSTAIN_PEDAL_SWITCH = 64
    PORTAMENTO_SWITCH = 65
    SOSTENUTO_SWITCH = 66
    SOFT_PEDAL_SWITCH = 67
    LEGATO_SWITCH = 68
    HOLD_2_SWITCH = 69

    SOUND_CONTROLLER_1 = 70
    SOUND_CONTROLLER_2 = 71
    SOUND_CONTROLLER_3 = 72
    SOUND_CONTROLLER_4 = 73
    SOUND_CONTROLLER_5 = 74
    SOUND_CONTROLLER_6 = 75
    SOUND_CONTROLLER_7 = 76
    SOUND_CONTROLLER_8 = 77
    SOUND_CONTROLLER_9 = 78
    SOUND_CONTROLLER_10 = 79
    GENERAL_PURPOSE_CONTROLLER_5 = 80
    GENERAL_PURPOSE_CONTROLLER_6 = 81
    GENERAL_PURPOSE_CONTROLLER_7 = 82
    GENERAL_PURPOSE_CONTROLLER_8 = 83
    PORTAMENTO_CONTROL = 84
    HIGH_RESOLUTION_VELOCITY_PREFIX = 88
    EFFECTS_DEPTH_1 = 91
    EFFECTS_DEPTH_2 = 92
    EFFECTS_DEPTH_3 = 93
    EFFECTS_DEPTH_4 = 94
    EFFECTS_DEPTH_5 = 95
    DATA_INCREMENT = 96
    DATA_DECREMENT = 97

    NRPN_LSB = 98
    NRPN_MSB = 99
    RPN_LSB = 100
    RPN_MSB = 101

    # Channel mode messages
    ALL_SOUND_OFF = 120
    RESET_ALL_CONTROLLERS = 121
    LOCAL_CONTROL = 122
    ALL_NOTES_OFF = 123
    OMNI_MODE_OFF = 124
    OMNI_MODE_ON = 125
    MONO_MODE_ON = 126
    POLY_MODE_ON = 127


# Controller values at or above this threshold switch a pedal on
SWITCH_THRESHOLD = 64

# Controllers from here up are channel mode messages
CHANNEL_MODE_FIRST = 120


def controller_name(number: int) -> Optional[str]:
    """Readable name for a controller number, or None if it has no standard meaning."""
    try:
        return MidiController(number).name
    except ValueError:
        return None
