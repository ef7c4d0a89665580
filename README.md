# modhost

Pure-Python building blocks for a small audio plugin host. It has no
third-party dependencies.

## What is inside

- `modhost.protocol`: a text command protocol. `Protocol` matches messages
  such as `param_set 0 gain 0.5` against registered command templates
  (words containing `%` are wildcards, a trailing `...` accepts any number
  of further arguments) and calls the callback of the first match with a
  `Request`. Callbacks reply with `Request.respond` or `Request.respond_int`
  (`"resp <n>"`). Mismatches are answered with `"not found"`,
  `"few arguments"` or `"many arguments"`. `Protocol.parse` returns the
  reply and also passes it, as bytes ending in NUL, to the optional
  `send(sender_id, payload)` function. `split_words` does the word
  splitting, with double quotes grouping words. The module also holds the
  host's command templates as constants (`EFFECT_ADD`, `CC_MAP`, `QUIT`,
  ...). At most `PROTOCOL_MAX_COMMANDS` (64) commands can be registered;
  one more raises `RuntimeError`.
- `modhost.monitor`: `ParameterMonitor` connects to a TCP listener
  (`start`, `stop`, `status`) and sends `monitor <instance> <symbol>
  <value>` messages with `send`; it is also a context manager that stops
  on exit. `check_condition` tests a value against one of the operators in
  `CONDITIONS`, and `floats_differ_enough` compares two floats to within
  single-precision epsilon.
- `modhost.compressor`: `Compressor`, a dynamics compressor with a soft
  knee and an adaptive release. Configure it with `set_params`, then call
  `process` (stereo) or `process_mono`; both return new lists and only
  process whole chunks of `SAMPLES_PER_UPDATE` (32) samples.
- `modhost.stereo`: `VolumeRamp` scales buffers by a volume that moves
  towards its target by at most `step_volume` per sample, and
  `process_stereo` produces the two outputs of a stereo pair from its
  inputs, their connection state, an optional compressor and the ramp.
- `modhost.ringbuffer`: `RingBuffer`, a circular buffer of floats over a
  fixed storage of 128 slots that can keep a running window power
  (`push_and_calculate_power`).

## Examples

```python
from modhost.protocol import Protocol

sent = []
proto = Protocol(send=lambda sender, payload: sent.append(payload))
proto.add_command("bypass %i %i", lambda req: req.respond_int(0))

print(proto.parse("bypass 3 1"))   # resp 0
print(sent)                        # [b'resp 0\x00']
print(proto.parse("bypass 3"))     # few arguments
```

```python
from modhost.compressor import Compressor
from modhost.stereo import VolumeRamp, process_stereo

comp = Compressor(48000)
comp.set_params(-12.0, 12.0, 2.0, 0.0001, 0.1, -3.0)
left, right = comp.process([0.9] * 64, [0.9] * 64)

ramp = VolumeRamp(volume=0.5, smooth_volume=1.0, step_volume=0.01)
out1, out2 = process_stereo(
    [0.2] * 64, [0.0] * 64,
    connected1=True, connected2=False,
    ramp=ramp, apply_volume=True, smoothing=True,
    mono_copy=True,
)
```

## What it does not do

There is no command-line program and no server: nothing here listens on a
socket, loads plugins or talks to an audio server. `Protocol` only
dispatches messages handed to it, and the callbacks that do the actual
work are yours to register. There is no noise gate, beat-clock filter or
event buffer in the package.

## Installing and testing

```
pip install .
pip install ".[test]"
pytest
```