# credscache/cli/__init__.py
"""
credscache 명령줄 인터페이스

Note:
    이 모듈은 Lazy Import 패턴을 사용합니다.
    boto3는 whoami 명령 실행 시점에만 로드됩니다.
"""

__all__ = ["cli"]

_IMPORT_MAPPING = {
    "cli": (".app", "cli"),
}


def __getattr__(name: str):
    """Lazy import - 실제 사용 시점에만 모듈 로드"""
    if name in _IMPORT_MAPPING:
        module_name, attr_name = _IMPORT_MAPPING[name]
        import importlib

        module = importlib.import_module(module_name, __name__)
        return getattr(module, attr_name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
