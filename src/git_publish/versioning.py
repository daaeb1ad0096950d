"""Version number logic for `<prefix><major>.<minor>.<patch>` tags."""

from dataclasses import dataclass
from functools import cmp_to_key


class InvalidVersionError(ValueError):
    """Tag does not have the `<prefix>N.N.N` shape."""


@dataclass(frozen=True)
class ParsedVersion:
    prefix: str
    major: int
    minor: int
    patch: int

    @property
    def key(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    @property
    def tag(self) -> str:
        return format_version(self.prefix, self.major, self.minor, self.patch)

    def __str__(self) -> str:
        return self.tag


def extract_prefix(tag_format: str) -> str:
    """
    Leading part of a tag format before the first digit.
    "v0.0.0" -> "v", "release1.2.3" -> "release", "1.0.0" -> "".
    A format without any digit is all prefix.
    """
    for i, c in enumerate(tag_format):
        if "0" <= c <= "9":
            return tag_format[:i]
    return tag_format


def _parse_component(part: str, tag: str) -> int:
    # str.isdigit() also accepts non-ASCII digits such as "²"
    if not part or not all("0" <= c <= "9" for c in part):
        raise InvalidVersionError(f"Invalid version component {part!r} in tag {tag!r}")
    return int(part)


def parse_version(tag: str, prefix: str) -> ParsedVersion:
    """
    Parse tag into its prefix and three numeric components.
    Raises InvalidVersionError unless tag is exactly prefix + "N.N.N".
    """
    if not tag.startswith(prefix):
        raise InvalidVersionError(f"Tag {tag!r} does not start with prefix {prefix!r}")
    parts = tag[len(prefix):].split(".")
    if len(parts) != 3:
        raise InvalidVersionError(f"Tag {tag!r} does not have three version components")
    major, minor, patch = (_parse_component(p, tag) for p in parts)
    return ParsedVersion(prefix=prefix, major=major, minor=minor, patch=patch)


def is_valid_tag(tag: str, prefix: str) -> bool:
    """True if tag parses against prefix."""
    try:
        parse_version(tag, prefix)
    except InvalidVersionError:
        return False
    return True


def format_version(prefix: str, major: int, minor: int, patch: int) -> str:
    return f"{prefix}{major}.{minor}.{patch}"


def compare_tags(a: str, b: str) -> int:
    """
    Compare two tags numerically by (major, minor, patch).
    Both are parsed with the prefix of a. Returns -1, 0 or 1.
    A tag that cannot be parsed ranks below any tag that can.
    """
    prefix = extract_prefix(a)
    try:
        va = parse_version(a, prefix)
    except InvalidVersionError:
        va = None
    try:
        vb = parse_version(b, prefix)
    except InvalidVersionError:
        vb = None
    if va is None or vb is None:
        if va is not None:
            return 1
        if vb is not None:
            return -1
        return 0
    if va.key > vb.key:
        return 1
    if va.key < vb.key:
        return -1
    return 0


def is_greater(new_tag: str, old_tag: str | None) -> bool:
    """
    True if new_tag is a later version than old_tag.
    Any tag is greater than no tag at all; a malformed tag on either side is never greater.
    """
    if not old_tag:
        return True
    prefix = extract_prefix(new_tag)
    if not is_valid_tag(new_tag, prefix) or not is_valid_tag(old_tag, prefix):
        return False
    return compare_tags(new_tag, old_tag) == 1


def sort_tags(tags: list[str]) -> list[str]:
    """Sort tags in ascending version order (g1.9.9 before g1.9.10)."""
    return sorted(tags, key=cmp_to_key(compare_tags))


def next_tag(last_tag: str | None, tag_format: str) -> str:
    """
    Suggest the tag after last_tag by bumping the patch component.
    last "v1.2.3" -> "v1.2.4", last "g1.9.9" -> "g1.9.10" (no carry into minor).
    No last tag, or one that does not fit the format -> the format itself.
    """
    if not last_tag:
        return tag_format
    try:
        version = parse_version(last_tag, extract_prefix(tag_format))
    except InvalidVersionError:
        return tag_format
    return format_version(version.prefix, version.major, version.minor, version.patch + 1)
