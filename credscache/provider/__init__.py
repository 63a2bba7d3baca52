# credscache/provider/__init__.py
"""
자격증명 Provider 구현 모듈

Provider 목록:
- FileCacheProvider: 상위 Provider를 감싸는 파일 캐시 데코레이터
- AssumeRoleProvider: STS AssumeRole 임시 자격증명 (만료형)
- StaticCredentialsProvider: 정적 액세스 키 (고정형)

Note:
    이 모듈은 Lazy Import 패턴을 사용합니다.
"""

__all__ = [
    # Base
    "Credentials",
    "CredentialsProvider",
    "Expirer",
    "FILE_CACHE_PROVIDER_NAME",
    # File Cache
    "FileCacheProvider",
    # Assume Role
    "AssumeRoleProvider",
    "stdin_token_provider",
    # Static
    "StaticCredentialsProvider",
]

_IMPORT_MAPPING = {
    "Credentials": (".base", "Credentials"),
    "CredentialsProvider": (".base", "CredentialsProvider"),
    "Expirer": (".base", "Expirer"),
    "FILE_CACHE_PROVIDER_NAME": (".base", "FILE_CACHE_PROVIDER_NAME"),
    "FileCacheProvider": (".file_cache", "FileCacheProvider"),
    "AssumeRoleProvider": (".assume_role", "AssumeRoleProvider"),
    "stdin_token_provider": (".assume_role", "stdin_token_provider"),
    "StaticCredentialsProvider": (".static", "StaticCredentialsProvider"),
}


def __getattr__(name: str):
    """Lazy import - 실제 사용 시점에만 모듈 로드"""
    if name in _IMPORT_MAPPING:
        module_name, attr_name = _IMPORT_MAPPING[name]
        import importlib

        module = importlib.import_module(module_name, __name__)
        return getattr(module, attr_name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
