"""Dynamics compressor with a soft knee and an adaptive release curve."""

from __future__ import annotations

import math
from collections.abc import Sequence

SAMPLES_PER_UPDATE = 32
"""The envelope is recalculated once per chunk of this many samples."""

_SATURATION_RELEASE = 0.0025  # seconds
_KNEE_SEARCH_STEPS = 15


def _div(a: float, b: float) -> float:
    """Division with IEEE results for a zero divisor."""
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def _pow(base: float, exponent: float) -> float:
    try:
        return math.pow(base, exponent)
    except OverflowError:
        return math.inf
    except ValueError:
        return math.nan


def _exp(x: float) -> float:
    try:
        return math.exp(x)
    except OverflowError:
        return math.inf


def _asin(x: float) -> float:
    if -1.0 <= x <= 1.0:
        return math.asin(x)
    return math.nan


def _lin2db(lin: float) -> float:
    if math.isnan(lin) or lin < 0:
        return math.nan
    if lin == 0:
        return -math.inf
    if math.isinf(lin):
        return math.inf
    return 20.0 * math.log10(lin)


def _db2lin(db: float) -> float:
    return _pow(10.0, 0.05 * db)


def _fix(value: float, default: float) -> float:
    """Replace NaN and infinities by ``default``."""
    if math.isnan(value) or math.isinf(value):
        return default
    return value


def _clamp(value: float, low: float, high: float) -> float:
    return low if value < low else (high if value > high else value)


def _knee_curve(x: float, k: float, linear_threshold: float) -> float:
    return linear_threshold + _div(1.0 - _exp(-k * (x - linear_threshold)), k)


def _knee_slope(x: float, k: float, linear_threshold: float) -> float:
    return _div(
        k * x, (k * linear_threshold + 1.0) * _exp(k * (x - linear_threshold)) - 1.0
    )


def _adaptive_release_curve(x: float, a: float, b: float, c: float, d: float) -> float:
    x2 = x * x
    return a * x2 * x + b * x2 + c * x + d


class Compressor:
    """Compressor state: parameters derived by ``set_params`` plus the running envelope."""

    def __init__(self, samplerate: float) -> None:
        self.samplerate = float(samplerate)
        self.detectoravg = 0.0
        self.compgain = 1.0
        self.maxcompdiffdb = -1.0
        self.ang90 = math.pi * 0.5
        self.ang90inv = 2.0 / math.pi

        self.threshold = 0.0
        self.knee = 0.0
        self.linearthreshold = 0.0
        self.slope = 0.0
        self.attacksamplesinv = 0.0
        self.satreleasesamplesinv = 0.0
        self.k = 0.0
        self.kneedboffset = 0.0
        self.linearthresholdknee = 0.0
        self.mastergain = 0.0
        self.a = 0.0
        self.b = 0.0
        self.c = 0.0
        self.d = 0.0

    def _curve(self, x: float) -> float:
        if x < self.linearthreshold:
            return x
        if self.knee <= 0.0:
            return _db2lin(self.threshold + self.slope * (_lin2db(x) - self.threshold))
        if x < self.linearthresholdknee:
            return _knee_curve(x, self.k, self.linearthreshold)
        return _db2lin(
            self.kneedboffset + self.slope * (_lin2db(x) - self.threshold - self.knee)
        )

    def set_params(
        self,
        threshold: float,
        knee: float,
        ratio: float,
        attack: float,
        release: float,
        makeup: float,
    ) -> None:
        """Derive the processing constants.

        ``threshold``, ``knee`` and ``makeup`` are in dB, ``attack`` and
        ``release`` in seconds.
        """
        linearthreshold = _db2lin(threshold)
        slope = _div(1.0, ratio)
        attacksamplesinv = _div(1.0, self.samplerate * attack)
        releasesamples = self.samplerate * release
        satreleasesamplesinv = _div(1.0, self.samplerate * _SATURATION_RELEASE)

        k = 5.0
        kneedboffset = 0.0
        linearthresholdknee = 0.0
        if knee > 0.0:
            xknee = _db2lin(threshold + knee)
            mink, maxk = 0.1, 10000.0
            for _ in range(_KNEE_SEARCH_STEPS):
                if _knee_slope(xknee, k, linearthreshold) < slope:
                    maxk = k
                else:
                    mink = k
                k = math.sqrt(mink * maxk)
            kneedboffset = _lin2db(_knee_curve(xknee, k, linearthreshold))
            linearthresholdknee = _db2lin(threshold + knee)

        self.threshold = threshold
        self.knee = knee
        self.linearthreshold = linearthreshold
        self.slope = slope
        self.k = k
        self.kneedboffset = kneedboffset
        self.linearthresholdknee = linearthresholdknee

        fulllevel = self._curve(1.0)
        mastergain = _db2lin(makeup) * _pow(_div(1.0, fulllevel), 0.6)

        # cubic through (0, y1), (1, y2), (2, y3), (3, y4)
        y1 = releasesamples * 0.090
        y2 = releasesamples * 0.160
        y3 = releasesamples * 0.420
        y4 = releasesamples * 0.980

        self.attacksamplesinv = attacksamplesinv
        self.satreleasesamplesinv = satreleasesamplesinv
        self.mastergain = mastergain
        self.a = (-y1 + 3.0 * y2 - 3.0 * y3 + y4) / 6.0
        self.b = y1 - 2.5 * y2 + 2.0 * y3 - 0.5 * y4
        self.c = (-11.0 * y1 + 18.0 * y2 - 9.0 * y3 + 2.0 * y4) / 6.0
        self.d = y1

    def _process(self, channels: list[list[float]]) -> list[list[float]]:
        size = len(channels[0])
        if any(len(channel) != size for channel in channels):
            raise ValueError("all channels must have the same length")

        detectoravg = self.detectoravg
        compgain = self.compgain
        maxcompdiffdb = self.maxcompdiffdb
        position = 0

        for _ in range(size // SAMPLES_PER_UPDATE):
            detectoravg = _fix(detectoravg, 1.0)
            scaleddesiredgain = _asin(detectoravg) * self.ang90inv
            compdiffdb = _lin2db(_div(compgain, scaleddesiredgain))

            if compdiffdb < 0.0:
                # releasing
                compdiffdb = _fix(compdiffdb, -1.0)
                maxcompdiffdb = -1.0
                x = (_clamp(compdiffdb, -12.0, 0.0) + 12.0) * 0.25
                releasesamples = _adaptive_release_curve(x, self.a, self.b, self.c, self.d)
                enveloperate = _db2lin(_div(5.0, releasesamples))
            else:
                # attacking
                compdiffdb = _fix(compdiffdb, 1.0)
                if maxcompdiffdb == -1 or maxcompdiffdb < compdiffdb:
                    maxcompdiffdb = compdiffdb
                attenuate = max(maxcompdiffdb, 0.5)
                enveloperate = 1.0 - _pow(0.25 / attenuate, self.attacksamplesinv)

            for _ in range(SAMPLES_PER_UPDATE):
                inputmax = max(abs(channel[position]) for channel in channels)

                if inputmax < 0.0001:
                    attenuation = 1.0
                else:
                    attenuation = self._curve(inputmax) / inputmax

                if attenuation > detectoravg:
                    attenuationdb = max(-_lin2db(attenuation), 2.0)
                    rate = _db2lin(attenuationdb * self.satreleasesamplesinv) - 1.0
                else:
                    rate = 1.0

                detectoravg += (attenuation - detectoravg) * rate
                if detectoravg > 1.0:
                    detectoravg = 1.0
                detectoravg = _fix(detectoravg, 1.0)

                if enveloperate < 1:
                    compgain += (scaleddesiredgain - compgain) * enveloperate
                else:
                    compgain *= enveloperate
                    if compgain > 1.0:
                        compgain = 1.0

                gain = self.mastergain * math.sin(self.ang90 * compgain)
                for channel in channels:
                    channel[position] *= gain
                position += 1

        self.detectoravg = detectoravg
        self.compgain = compgain
        self.maxcompdiffdb = maxcompdiffdb
        return channels

    def process(
        self, left: Sequence[float], right: Sequence[float]
    ) -> tuple[list[float], list[float]]:
        """Compress a stereo pair, keyed on the louder channel.

        Only whole chunks of ``SAMPLES_PER_UPDATE`` samples are processed; a
        trailing partial chunk is returned unchanged.
        """
        out_left, out_right = self._process([list(left), list(right)])
        return out_left, out_right

    def process_mono(self, buffer: Sequence[float]) -> list[float]:
        """Compress a single channel; see ``process``."""
        (out,) = self._process([list(buffer)])
        return out