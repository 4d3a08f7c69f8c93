from .associations import BelongsTo, HasMany, HasOne  # noqa
from .attributes import AttributeSet  # noqa
from .base import Resource, ResourceOptions  # noqa
from .collection import ResourceCollection  # noqa
from .config import Settings, configure_logging, get_settings  # noqa
from .exceptions import (  # noqa
    AssociationTargetNotFoundError,
    BadRequest,
    ClientError,
    CoercionError,
    ConnectionRefused,
    ConnectionTimeoutError,
    ForbiddenAccess,
    InvalidDeclarationError,
    InvalidOptionError,
    InvalidRequestError,
    MethodNotAllowed,
    MissingPrefixParamError,
    Redirection,
    RemoteResourceException,
    ResourceConflict,
    ResourceGone,
    ResourceInvalid,
    ResourceNotFound,
    ServerError,
    TransportError,
    UnauthorizedAccess,
    UnknownCasingError,
    UnknownFormatError,
)
from .http_mock import HttpMock  # noqa
from .schema import AttributeType, Schema, SchemaEntry  # noqa
