from pathlib import Path


def string_or_path(pathlike) -> Path | None:
    if not pathlike:
        return pathlike
    if isinstance(pathlike, str):
        return Path(pathlike)
    assert isinstance(pathlike, Path), f"{pathlike} is not a path"
    return pathlike


def http_base_url(url: str) -> str:
    """Require an http(s) URL and drop trailing slashes so paths can be appended"""
    if not url.startswith(("http://", "https://")):
        raise ValueError(f"{url!r} is not an http(s) URL")
    return url.rstrip("/")
