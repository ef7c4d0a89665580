import math

import pytest

from modhost.compressor import SAMPLES_PER_UPDATE, Compressor


def _make(threshold=-12.0, knee=12.0, ratio=2.0, makeup=-3.0):
    comp = Compressor(48000)
    comp.set_params(threshold, knee, ratio, 0.0001, 0.1, makeup)
    return comp


def test_initial_state():
    comp = Compressor(44100)
    assert comp.samplerate == 44100
    assert comp.detectoravg == 0.0
    assert comp.compgain == 1.0
    assert comp.maxcompdiffdb == -1.0
    assert comp.ang90 == pytest.approx(math.pi / 2)
    assert comp.ang90 * comp.ang90inv == pytest.approx(1.0)


def test_set_params_stores_threshold_and_slope():
    comp = _make(threshold=-15.0, knee=15.0, ratio=4.0)
    assert comp.threshold == -15.0
    assert comp.knee == 15.0
    assert comp.slope == pytest.approx(1.0 / 4.0)
    assert comp.linearthreshold == pytest.approx(10 ** (-15.0 / 20.0))
    assert comp.linearthresholdknee == pytest.approx(1.0)


def test_no_knee_keeps_initial_guess():
    comp = _make(knee=0.0)
    assert comp.k == 5.0
    assert comp.kneedboffset == 0.0
    assert comp.linearthresholdknee == 0.0


def test_makeup_scales_master_gain():
    loud = _make(makeup=0.0)
    quiet = _make(makeup=-6.0)
    assert quiet.mastergain / loud.mastergain == pytest.approx(10 ** (-6.0 / 20.0))


def test_short_buffer_is_untouched():
    comp = _make()
    data = [0.5] * (SAMPLES_PER_UPDATE - 1)
    assert comp.process_mono(data) == data
    assert comp.compgain == 1.0
    assert comp.detectoravg == 0.0


def test_trailing_partial_chunk_is_untouched():
    comp = _make()
    data = [0.5] * (SAMPLES_PER_UPDATE + 5)
    out = comp.process_mono(data)
    assert len(out) == len(data)
    assert out[SAMPLES_PER_UPDATE:] == data[SAMPLES_PER_UPDATE:]


def test_input_is_not_modified():
    comp = _make()
    data = [0.3] * (2 * SAMPLES_PER_UPDATE)
    copy = list(data)
    comp.process_mono(data)
    assert data == copy


def test_silence_stays_silent():
    comp = _make()
    left, right = comp.process([0.0] * 128, [0.0] * 128)
    assert left == [0.0] * 128
    assert right == [0.0] * 128


def test_stereo_with_equal_channels_matches_mono():
    signal = [math.sin(i * 0.05) * 0.9 for i in range(4 * SAMPLES_PER_UPDATE)]
    stereo = _make()
    mono = _make()
    left, right = stereo.process(signal, signal)
    single = mono.process_mono(signal)
    assert left == pytest.approx(single)
    assert right == pytest.approx(single)
    assert stereo.compgain == pytest.approx(mono.compgain)


def test_stereo_keyed_on_louder_channel():
    quiet = [0.01] * 64
    loud = [0.9] * 64
    a = _make()
    b = _make()
    _, right = a.process(quiet, loud)
    mono = b.process_mono(loud)
    assert right == pytest.approx(mono)


def test_mismatched_lengths_rejected():
    comp = _make()
    with pytest.raises(ValueError):
        comp.process([0.0] * 32, [0.0] * 64)


def test_loud_signal_gets_less_gain_than_quiet_signal():
    samples = 48000
    loud_comp = _make()
    quiet_comp = _make()
    loud = loud_comp.process_mono([1.0] * samples)
    quiet = quiet_comp.process_mono([0.01] * samples)
    loud_gain = loud[-1] / 1.0
    quiet_gain = quiet[-1] / 0.01
    assert all(math.isfinite(v) for v in loud)
    assert 0 < loud_gain < quiet_gain
    assert loud_comp.detectoravg < quiet_comp.detectoravg