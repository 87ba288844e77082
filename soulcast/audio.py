"""The sound chip: pulse and 4-bit PCM channels mixed into stereo float samples."""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from os import PathLike
from typing import List, Union

logger = logging.getLogger(__name__)

SFX_COUNT = 0x100
AUDIO_SAMPLERATE = 44100
AUDIO_CHANNELS = 4
PCM_CHANNEL_SNAPSHOTS = 32
OCTAVE_BASE_FREQUENCY = 110.0

_VOLUME = 0.2


class ChannelType(IntEnum):
    """The kind of voice a sound chip channel produces."""

    PULSE0 = 0
    PULSE1 = 1
    PCM = 2
    NOISE = 3


CHANNEL_COUNT = len(ChannelType)

CHANNEL_TYPE_NAMES = ("Pulse 1", "Pulse 2", "PCM", "Noise")


class AudioInterpolation(Enum):
    NONE = 0  # nearest neighbour
    GAUSSIAN = 1
    HERMITE = 2


def _empty_pcm_data() -> List[int]:
    return [0] * PCM_CHANNEL_SNAPSHOTS


@dataclass
class PCMChannel:
    """A 32-step table of 4-bit samples."""

    data: List[int] = field(default_factory=_empty_pcm_data)
    empty: bool = True
    sample_rate: float = float(AUDIO_SAMPLERATE)


@dataclass
class BaseChannel:
    """The state of one voice of the sound chip."""

    type: ChannelType = ChannelType.PULSE0
    active: bool = False
    frequency: float = 440.0
    phase: float = 0.0
    pan: float = 0.0  # -1 left, 0 centre, +1 right
    pcm: PCMChannel = field(default_factory=PCMChannel)


def load_4bit_pcm_file(filename: Union[str, PathLike]) -> PCMChannel:
    """Read up to 32 4-bit samples, two per byte with the high nibble first.

    Raises OSError when the file cannot be opened.
    """
    with open(filename, "rb") as file:
        raw = file.read((PCM_CHANNEL_SNAPSHOTS + 1) // 2)

    samples: List[int] = []
    for byte in raw:
        samples.append((byte >> 4) & 0x0F)
        samples.append(byte & 0x0F)
    samples = samples[:PCM_CHANNEL_SNAPSHOTS]

    if len(samples) != PCM_CHANNEL_SNAPSHOTS:
        logger.warning(
            "Expected %d 4-bit samples, got %d", PCM_CHANNEL_SNAPSHOTS, len(samples)
        )

    channel = PCMChannel()
    channel.data[: len(samples)] = samples
    channel.empty = False
    return channel


def midi_note_to_freq(midi_note: int) -> float:
    """Frequency in Hz of a MIDI note number in equal temperament."""
    return 440.0 * math.pow(2.0, (midi_note - 69) / 12.0)


class SoundChip:
    """All channels of the console's sound hardware."""

    def __init__(self) -> None:
        self.channels: List[BaseChannel] = [
            BaseChannel(type=kind) for kind in ChannelType
        ]

    def generate_audio(self, num_samples: int, sample_rate: int = AUDIO_SAMPLERATE) -> List[float]:
        """Mix num_samples stereo frames, returned interleaved left/right."""
        stream = [0.0] * (num_samples * 2)

        for ch in self.channels:
            if not ch.active:
                continue
            if ch.type in (ChannelType.PULSE0, ChannelType.PULSE1):
                self._mix_pulse(ch, stream, num_samples, sample_rate)
            elif ch.type is ChannelType.PCM:
                self._mix_pcm(ch, stream, num_samples, sample_rate)

        return stream

    @staticmethod
    def _mix_pulse(ch: BaseChannel, stream: List[float], num_samples: int, sample_rate: int) -> None:
        phase_increment = ch.frequency / sample_rate
        for i in range(num_samples):
            value = _VOLUME if math.fmod(ch.phase, 1.0) < 0.5 else -_VOLUME
            stream[i * 2] += value
            stream[i * 2 + 1] += value
            ch.phase += phase_increment
            if ch.phase >= 1.0:
                ch.phase -= 1.0

    @staticmethod
    def _mix_pcm(ch: BaseChannel, stream: List[float], num_samples: int, sample_rate: int) -> None:
        if ch.pcm.empty:
            return
        left_gain = math.sqrt((1.0 - ch.pan) * 0.5)
        right_gain = math.sqrt((1.0 + ch.pan) * 0.5)
        step = ch.frequency * PCM_CHANNEL_SNAPSHOTS / sample_rate
        for i in range(num_samples):
            value = ch.pcm.data[int(ch.phase) % PCM_CHANNEL_SNAPSHOTS]
            sample = (value / 15.0) * 2.0 - 1.0

            ch.phase += step
            if ch.phase >= PCM_CHANNEL_SNAPSHOTS:
                ch.phase -= PCM_CHANNEL_SNAPSHOTS

            stream[i * 2] += sample * left_gain * _VOLUME
            stream[i * 2 + 1] += sample * right_gain * _VOLUME

    def set_channel_frequency(self, channel_index: int, frequency: float) -> None:
        """Set a channel's frequency; unknown channel indices are ignored."""
        if 0 <= channel_index < CHANNEL_COUNT:
            self.channels[channel_index].frequency = frequency

    def set_channel_active(self, channel_index: int, active: bool) -> None:
        """Switch a channel on or off; unknown channel indices are ignored."""
        if 0 <= channel_index < CHANNEL_COUNT:
            self.channels[channel_index].active = active