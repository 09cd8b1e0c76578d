import platform
from functools import lru_cache
from importlib.metadata import PackageNotFoundError, version


@lru_cache(maxsize=1)
def package_version() -> str:
    try:
        return version("restrequest")
    except PackageNotFoundError:
        return "0.0.0"


@lru_cache(maxsize=1)
def platform_suffix() -> str:
    system = platform.system() or "UnknownOS"
    release = platform.release()
    os_part = f"{system} {release}".strip()
    return (
        f"restrequest/{package_version()} "
        f"Python/{platform.python_version()} ({os_part}; {platform.machine()})"
    )


def generate_user_agent(product_info: str) -> str:
    """Append the library and platform description to `product_info`.

    e.g. ``myapp/1.0 restrequest/0.1.0 Python/3.12.1 (Linux 6.5.0; x86_64)``
    """
    return f"{product_info} {platform_suffix()}"
