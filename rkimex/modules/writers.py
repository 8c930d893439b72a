"""Solution writers: sinks for (t, y) points emitted by output modules."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, TextIO, Union
import numpy as np
from numpy.typing import NDArray


class SolutionWriter(ABC):
    """Receives a stream of solution points between begin and end."""

    def begin(self) -> None:
        """Prepare the sink; called once before the first point."""

    @abstractmethod
    def emit(self, t: float, y: NDArray) -> None:
        ...

    def end(self) -> None:
        """Flush and release the sink."""


class MemoryWriter(SolutionWriter):
    """Keeps emitted points in lists."""

    def __init__(self):
        self.times: list[float] = []
        self.values: list[NDArray] = []

    def begin(self) -> None:
        self.times.clear()
        self.values.clear()

    def emit(self, t, y):
        self.times.append(float(t))
        self.values.append(np.array(y, dtype=float))

    def as_arrays(self) -> tuple[NDArray, NDArray]:
        """Times (m,) and values (m, n)."""
        if not self.values:
            return np.empty(0), np.empty((0, 0))
        return np.array(self.times), np.vstack(self.values)


class DiskWriter(SolutionWriter):
    """
    Text file with one line per point.

    Each line holds the time followed by the components, separated by
    spaces (two after the time). A blank line closes the file.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._out: Optional[TextIO] = None

    def begin(self) -> None:
        self._out = open(self.path, "w")

    def emit(self, t, y):
        if self._out is None:
            self.begin()
        fields = "".join(f" {float(v)!r}" for v in np.asarray(y).ravel())
        self._out.write(f"{float(t)!r} {fields}\n")

    def end(self) -> None:
        if self._out is None:
            return
        self._out.write("\n")
        self._out.close()
        self._out = None


class CompoundSolutionWriter(SolutionWriter):
    """Fans every call out to several writers, in order."""

    def __init__(self, writers: list[SolutionWriter]):
        self.writers = list(writers)

    def begin(self) -> None:
        for writer in self.writers:
            writer.begin()

    def emit(self, t, y):
        for writer in self.writers:
            writer.emit(t, y)

    def end(self) -> None:
        for writer in self.writers:
            writer.end()
