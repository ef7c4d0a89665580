"""Stereo pair handling for the output monitor: routing, compression and volume."""

from __future__ import annotations

import math
from collections.abc import Sequence

from .compressor import Compressor


class VolumeRamp:
    """Output volume that moves towards its target by at most ``step_volume`` per sample."""

    def __init__(self, volume: float = 1.0, smooth_volume: float = 1.0,
                 step_volume: float = 0.0) -> None:
        self.volume = volume
        self.smooth_volume = smooth_volume
        self.step_volume = step_volume

    def apply(self, buffers: Sequence[Sequence[float]], smoothing: bool) -> list[list[float]]:
        """Scale every buffer by the (optionally ramping) volume, sample by sample.

        All buffers share one ramp; ``smooth_volume`` is left at its final value.
        """
        outputs = [list(buffer) for buffer in buffers]
        if not outputs:
            return outputs
        length = len(outputs[0])
        if any(len(buffer) != length for buffer in outputs):
            raise ValueError("all buffers must have the same length")

        smooth = self.smooth_volume
        for position in range(length):
            if smoothing:
                dy = self.volume - smooth
                smooth += math.copysign(min(abs(dy), self.step_volume), dy)
            for buffer in outputs:
                buffer[position] *= smooth
        self.smooth_volume = smooth
        return outputs


def process_stereo(
    in1: Sequence[float],
    in2: Sequence[float],
    connected1: bool,
    connected2: bool,
    ramp: VolumeRamp,
    apply_volume: bool,
    smoothing: bool,
    compressor: Compressor | None = None,
    mono_copy: bool = False,
) -> tuple[list[float], list[float]]:
    """Produce the two outputs of a stereo pair.

    With both inputs connected, both are compressed together (when a
    compressor is given) and scaled by the volume. With one input connected,
    only that side is processed; the other side gets a copy of the raw
    connected input when ``mono_copy`` is set, silence otherwise. With no
    input connected, both outputs are silent.
    """
    if len(in1) != len(in2):
        raise ValueError("inputs must have the same length")
    silence = [0.0] * len(in1)

    if connected1 and connected2:
        out1, out2 = list(in1), list(in2)
        if compressor is not None:
            out1, out2 = compressor.process(out1, out2)
        if apply_volume:
            out1, out2 = ramp.apply([out1, out2], smoothing)
        return out1, out2

    if connected1 or connected2:
        source = in1 if connected1 else in2
        processed = list(source)
        if compressor is not None:
            processed = compressor.process_mono(processed)
        if apply_volume:
            (processed,) = ramp.apply([processed], smoothing)
        other = list(source) if mono_copy else silence
        return (processed, other) if connected1 else (other, processed)

    return silence, list(silence)