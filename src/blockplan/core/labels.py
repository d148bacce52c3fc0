from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass

METRIC_NAME = "__name__"


@dataclass(frozen=True)
class Label:
    name: str
    value: str


@dataclass(frozen=True)
class Labels:
    """
    Ordered, immutable label set.

    Order is preserved as given; `__name__` carries the metric name by
    convention. Use to_map() for the plain dict projection stored in block meta.
    """

    items: tuple[Label, ...] = ()

    @staticmethod
    def of(*pairs: tuple[str, str]) -> Labels:
        return Labels(tuple(Label(str(n), str(v)) for n, v in pairs))

    @staticmethod
    def from_dict(d: Mapping[str, str]) -> Labels:
        return Labels.of(*d.items())

    @staticmethod
    def parse(flags: Iterable[str]) -> Labels:
        """
        Parse CLI style selectors: `cluster=eu-1` or `replica="a"`.
        """
        pairs: list[tuple[str, str]] = []
        for raw in flags:
            name, sep, value = raw.partition("=")
            name = name.strip()
            if not sep or not name:
                raise ValueError(f"label must be in name=value form: {raw!r}")
            value = value.strip()
            if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
                value = value[1:-1]
            pairs.append((name, value))
        return Labels.of(*pairs)

    def get(self, name: str, default: str | None = None) -> str | None:
        for lbl in self.items:
            if lbl.name == name:
                return lbl.value
        return default

    @property
    def metric_name(self) -> str | None:
        return self.get(METRIC_NAME)

    def to_map(self) -> dict[str, str]:
        return {lbl.name: lbl.value for lbl in self.items}

    def __iter__(self) -> Iterator[Label]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __str__(self) -> str:
        inner = ", ".join(f'{lbl.name}="{lbl.value}"' for lbl in self.items)
        return "{" + inner + "}"


def as_labels(value: Labels | Mapping[str, str] | None) -> Labels:
    if value is None:
        return Labels()
    if isinstance(value, Labels):
        return value
    return Labels.from_dict(value)
