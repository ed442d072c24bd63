from collections.abc import Sequence
from typing import Iterator, Optional


class ReadOnlyList(Sequence):
    """Read-only window over the head of another sequence.

    Without ``count`` the view follows the live length of ``source``; with
    ``count`` it exposes exactly the first ``count`` items.

    :ivar source: Wrapped sequence.
    :type source: Sequence
    """

    def __init__(self, source: Sequence, count: Optional[int] = None):
        """Wrap ``source``.

        :param source: Sequence to expose.
        :type source: Sequence
        :param count: Fixed number of visible items, or ``None``.
        :type count: Optional[int]
        :returns: None
        :rtype: None
        :raises TypeError: If ``source`` is ``None``.
        :raises IndexError: If ``count`` is outside ``[0, len(source)]``.
        """
        if source is None:
            raise TypeError("source must not be None")
        if count is not None and (count < 0 or count > len(source)):
            raise IndexError(f"Count {count} out of range")
        self.source = source
        self._count = count

    def __len__(self) -> int:
        return len(self.source) if self._count is None else self._count

    def __getitem__(self, index: int):
        if index < 0 or index >= len(self):
            raise IndexError(f"Index {index} out of range")
        return self.source[index]

    def __iter__(self) -> Iterator:
        for i in range(len(self)):
            yield self.source[i]
