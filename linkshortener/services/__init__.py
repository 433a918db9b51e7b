from linkshortener.services.code_generator import CodeGenerator
from linkshortener.services.resolver import LinkResolver
from linkshortener.services.lifecycle import LinkLifecycleManager


__all__ = [
    'CodeGenerator',
    'LinkResolver',
    'LinkLifecycleManager',
]
