# credscache/cachekey/__init__.py
"""
캐시 키 생성 모듈

AssumeRole 요청 파라미터로부터 AWS CLI 호환 캐시 키(SHA-1)를 생성합니다.

Note:
    이 모듈은 Lazy Import 패턴을 사용합니다.
"""

__all__ = [
    "AssumeRoleCacheKeyGenerator",
    "assume_role_cache_key",
]

_IMPORT_MAPPING = {
    "AssumeRoleCacheKeyGenerator": (".assume_role", "AssumeRoleCacheKeyGenerator"),
    "assume_role_cache_key": (".assume_role", "assume_role_cache_key"),
}


def __getattr__(name: str):
    """Lazy import - 실제 사용 시점에만 모듈 로드"""
    if name in _IMPORT_MAPPING:
        module_name, attr_name = _IMPORT_MAPPING[name]
        import importlib

        module = importlib.import_module(module_name, __name__)
        return getattr(module, attr_name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
