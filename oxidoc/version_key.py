"""Logic for ordering crate versions numerically."""


def version_key(version: str) -> tuple[tuple[int, ...], int, str]:
    """Return a sort key so that ``0.10.0`` ranks above ``0.9.3``.

    Build metadata is ignored and a pre-release ranks below its release.
    """
    core = version.split("+", 1)[0]
    release, _, pre = core.partition("-")
    numbers = tuple(int(part) if part.isdigit() else 0 for part in release.split("."))
    return numbers, 0 if pre else 1, pre
