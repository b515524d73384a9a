"""
Pipeline assembly.

Wires ErrorCatcher and IpFilter from a GuardConfig:

    config = GuardConfig.from_env()
    config.validate()

    pipeline = create_pipeline(config)
    handler = pipeline.wrap(app)
    response = handler(request)

ErrorCatcher is always the outermost layer. IpFilter is added inside it
only when allowed_ips is configured.
"""

from typing import Optional
import logging

from .config import GuardConfig
from .errors.container import ServiceContainer
from .errors.handler import ErrorHandler
from .http.response import ResponseFactory
from .middleware.base import MiddlewarePipeline
from .middleware.error_catcher import ErrorCatcher
from .middleware.ip_filter import IpFilter
from .validation.ip import IpValidator


logger = logging.getLogger(__name__)


def create_error_catcher(
    config: GuardConfig,
    container=None,
    response_factory: Optional[ResponseFactory] = None,
) -> ErrorCatcher:
    return ErrorCatcher(
        response_factory or ResponseFactory(),
        ErrorHandler(debug=config.debug),
        container if container is not None else ServiceContainer.with_defaults(),
    )


def create_ip_filter(
    config: GuardConfig,
    response_factory: Optional[ResponseFactory] = None,
) -> IpFilter:
    return IpFilter(
        IpValidator(config.allowed_ips),
        response_factory or ResponseFactory(),
        config.client_ip_attribute,
    )


def create_pipeline(
    config: Optional[GuardConfig] = None,
    container=None,
    response_factory: Optional[ResponseFactory] = None,
) -> MiddlewarePipeline:
    """
    Build the guarded middleware pipeline.

    Args:
        config:           Settings (defaults to GuardConfig())
        container:        Renderer source for ErrorCatcher
        response_factory: Shared by both middleware

    Raises:
        InvalidRangeError: If allowed_ips holds a malformed range
    """
    config = config or GuardConfig()
    response_factory = response_factory or ResponseFactory()

    pipeline = MiddlewarePipeline()
    pipeline.add(create_error_catcher(config, container, response_factory))

    if config.allowed_ips:
        pipeline.add(create_ip_filter(config, response_factory))
    else:
        logger.debug("No allowed_ips configured, IP filtering disabled")

    return pipeline
