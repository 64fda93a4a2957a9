"""
L2 Resolver — platform triple → artifact descriptor.
"""

from princeinstall.core.services.provision.resolver.artifact_resolution import (  # noqa: F401
    resolve_artifact,
    supported_platforms,
)
