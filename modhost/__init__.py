"""Audio host building blocks: command protocol, parameter monitoring, compressor, stereo output and ring buffer."""

__version__ = "0.1.1"