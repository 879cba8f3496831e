# codepoints.py: shared Private Use Area codepoints for a font family
from dataclasses import dataclass

BASE_CODEPOINT = 0xE900


class AllocationError(RuntimeError):
    """An icon ended up with two codepoints, or the run is not dense."""


@dataclass(frozen=True)
class CodepointMap:
    family: str
    base: int
    codepoints: tuple   # ((icon_name, codepoint), ...) in assignment order

    def as_dict(self):
        return dict(self.codepoints)

    def __len__(self):
        return len(self.codepoints)

    def __contains__(self, name):
        return name in self.as_dict()

    def __getitem__(self, name):
        return self.as_dict()[name]

    def names(self):
        return [name for name, _ in self.codepoints]

    def for_variant(self, names):
        """(name, codepoint) pairs for one variant's icons, in sorted name order."""
        mapping = self.as_dict()
        missing = [n for n in names if n not in mapping]
        if missing:
            raise AllocationError(
                f"{self.family}: no codepoint allocated for {', '.join(sorted(missing))}"
            )
        return [(n, mapping[n]) for n in sorted(names)]

    def to_hex(self):
        return {name: hex_codepoint(cp) for name, cp in self.codepoints}


def hex_codepoint(cp: int) -> str:
    return f"{cp:04X}"


def allocate(family, icons_by_variant, base=BASE_CODEPOINT) -> CodepointMap:
    """Assign one codepoint per distinct icon name across a family.

    Variants are visited in the family's declared order and names within a
    variant in ascending order; a name keeps the codepoint of its first
    appearance. ``icons_by_variant`` maps StyleVariant -> iterable of names;
    variants missing from it contribute nothing.
    """
    assigned = {}
    order = []
    for variant in family.variants:
        for name in sorted(set(icons_by_variant.get(variant, ()))):
            if name in assigned:
                continue
            assigned[name] = base + len(order)
            order.append(name)
    return CodepointMap(family.family, base, tuple((n, assigned[n]) for n in order))


def verify_shared(cmap: CodepointMap, per_variant):
    """Check that every variant's subset agrees with the family map.

    ``per_variant`` maps a variant label to a list of (name, codepoint) pairs
    as handed to font compilation. Raises AllocationError on any conflict.
    """
    seen = {}
    for label, pairs in per_variant.items():
        for name, cp in pairs:
            if name in seen and seen[name][1] != cp:
                other, other_cp = seen[name]
                raise AllocationError(
                    f"{cmap.family}: '{name}' is U+{hex_codepoint(other_cp)} in {other} "
                    f"but U+{hex_codepoint(cp)} in {label}"
                )
            seen[name] = (label, cp)
            if name not in cmap or cmap[name] != cp:
                raise AllocationError(
                    f"{cmap.family}: '{name}' in {label} does not match the family mapping"
                )

    values = [cp for _, cp in cmap.codepoints]
    if values != list(range(cmap.base, cmap.base + len(values))):
        raise AllocationError(f"{cmap.family}: codepoints are not a dense run from U+{hex_codepoint(cmap.base)}")
