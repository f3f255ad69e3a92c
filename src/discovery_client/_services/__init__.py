from ._base_service import BaseService
from ._invocation import Invocation
from ._method import ApiMethod
from ._resource import Api, Resource

__all__ = [
    "Api",
    "ApiMethod",
    "BaseService",
    "Invocation",
    "Resource",
]
