# credscache/cache/__init__.py
"""
자격증명 캐시 파일 모듈

AssumeRole로 받은 임시 자격증명을 AWS CLI 호환 JSON 파일로 저장/로드합니다.
캐시 파일 위치: {cache_dir}/{cache_key}.json

Note:
    이 모듈은 Lazy Import 패턴을 사용합니다.
"""

__all__ = [
    "CachedCredentials",
    "FileCache",
    "cache_file_path",
    "validate_cache_key",
    "load_credentials",
    "store_credentials",
    "format_timestamp",
    "parse_expiration",
]

_IMPORT_MAPPING = {
    "CachedCredentials": (".file_cache", "CachedCredentials"),
    "FileCache": (".file_cache", "FileCache"),
    "cache_file_path": (".file_cache", "cache_file_path"),
    "validate_cache_key": (".file_cache", "validate_cache_key"),
    "load_credentials": (".file_cache", "load_credentials"),
    "store_credentials": (".file_cache", "store_credentials"),
    "format_timestamp": (".file_cache", "format_timestamp"),
    "parse_expiration": (".file_cache", "parse_expiration"),
}


def __getattr__(name: str):
    """Lazy import - 실제 사용 시점에만 모듈 로드"""
    if name in _IMPORT_MAPPING:
        module_name, attr_name = _IMPORT_MAPPING[name]
        import importlib

        module = importlib.import_module(module_name, __name__)
        return getattr(module, attr_name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
