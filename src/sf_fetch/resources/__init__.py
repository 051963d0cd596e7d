from .base import ApiResource
from .sobject import SObjectResource
from .query import QueryResource
from .chatter import ChatterResource
from .apex_rest import ApexRestResource
from .userinfo import UserInfoResource

__all__ = [
    "ApiResource",
    "SObjectResource",
    "QueryResource",
    "ChatterResource",
    "ApexRestResource",
    "UserInfoResource",
]
