"""
Running numeric codes for vertex labels.
"""

from typing import Dict, Iterator, Optional

INITIAL_VALUE = 1.0
DEFAULT_STEP = 0.00005


class VertexCoder:
    """
    Assigns each new label the current value, then advances by ``step``.

    Codes are stable: a label keeps the value it was first given. Share
    one coder across graphs to make their codes comparable.
    """

    def __init__(self, start: float = INITIAL_VALUE, step: float = DEFAULT_STEP):
        self.start = start
        self.step = step
        self._value = start
        self._codes: Dict[str, float] = {}

    def put_label(self, label: str) -> float:
        """Code of ``label``, assigning the next value if it is new."""
        code = self._codes.get(label)
        if code is not None:
            return code
        code = self._value
        self._codes[label] = code
        self._value += self.step
        return code

    # Reading an unseen label assigns it, as in put_label
    get_label = put_label

    def get(self, label: str) -> Optional[float]:
        """Code of ``label`` without assigning one."""
        return self._codes.get(label)

    def clear(self) -> None:
        self._codes.clear()
        self._value = self.start

    def __contains__(self, label: str) -> bool:
        return label in self._codes

    def __len__(self) -> int:
        return len(self._codes)

    def __iter__(self) -> Iterator[str]:
        return iter(self._codes)
