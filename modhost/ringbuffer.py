"""Fixed-storage circular buffer of floats with a running window power."""

from __future__ import annotations

import math

RINGBUFFER_STORAGE = 128


class RingBuffer:
    """Circular buffer over a fixed storage of ``RINGBUFFER_STORAGE`` floats.

    Only the first ``capacity`` slots of the storage take part in the ring.
    """

    def __init__(self, size: int = RINGBUFFER_STORAGE) -> None:
        self._data: list[float] = [0.0] * RINGBUFFER_STORAGE
        self.capacity = 0
        self.length = 0
        self.front_index = 0
        self.back_index = 0
        self.power = 0.0
        self.clear(size)

    def clear(self, size: int) -> None:
        """Empty the buffer, zero the storage and set the ring size."""
        if not 1 <= size <= RINGBUFFER_STORAGE:
            raise ValueError(
                f"ring size must be between 1 and {RINGBUFFER_STORAGE}, got {size}"
            )
        self.capacity = size
        self.length = 0
        self.front_index = 0
        self.back_index = size - 1
        self.power = 0.0
        self._data = [0.0] * RINGBUFFER_STORAGE

    def __len__(self) -> int:
        return self.length

    def push(self) -> None:
        """Advance the back, dropping the front element when full."""
        self.back_index = (self.back_index + 1) % self.capacity
        if self.length == self.capacity:
            self.front_index = (self.front_index + 1) % self.capacity
        else:
            self.length += 1

    def push_sample(self, value: float) -> None:
        self.push()
        self._data[self.back_index] = value

    def pop(self) -> None:
        """Drop the front element; does nothing when empty."""
        if self.length > 0:
            self.length -= 1
            self.front_index = (self.front_index + 1) % self.capacity

    def front(self) -> float:
        return self._data[self.front_index]

    def back(self) -> float:
        return self._data[self.back_index]

    def get(self, index: int) -> float:
        """Value at a raw storage position."""
        return self._data[index]

    def empty(self) -> bool:
        return self.length == 0

    def full(self) -> bool:
        return self.length == self.capacity

    def back_erase(self, n: int) -> None:
        """Remove ``n`` elements from the back; clears when ``n`` covers all."""
        if n >= self.length:
            self.clear(self.capacity)
        else:
            self.length -= n
            self.back_index = (self.front_index + self.length - 1) % self.capacity

    def front_erase(self, n: int) -> None:
        """Remove ``n`` elements from the front; clears when ``n`` covers all."""
        if n >= self.length:
            self.clear(self.capacity)
        else:
            self.length -= n
            self.front_index = (self.front_index + n) % self.capacity

    def peak_index(self) -> int:
        """Storage index of the first largest positive value, or 0."""
        peak_index = 0
        peak_value = 0.0
        for index, value in enumerate(self._data[: self.capacity]):
            if peak_value < value:
                peak_value = value
                peak_index = index
        return peak_index

    def push_and_calculate_power(self, value: float) -> float:
        """Push ``|value| / capacity`` and return the updated window power."""
        contribution = math.sqrt(value * value) * (1.0 / self.capacity)
        if self.length < self.capacity:
            self.power += contribution
        else:
            self.power += contribution - self.front()
            self.pop()
        self.push_sample(contribution)
        return self.power