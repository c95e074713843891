"""
Catenis API endpoint catalogue and result types
"""

from .endpoints import ENDPOINTS, Endpoint, get_endpoint
from .models import (
    ApiRecord,
    CatenisNodeInfo,
    ClientInfo,
    DeviceInfo,
    GetAssetBalanceResult,
    IssueAssetResult,
    LogMessageResult,
    MessageInfo,
    MessageProcessError,
    MessageProcessProgress,
    MessageProcessSuccess,
    NotificationEvent,
    ReadMessageResult,
    ReissueAssetResult,
    ResultRecord,
    RetrieveDeviceIdentificationInfoResult,
    RetrieveMessageContainerResult,
    RetrieveMessageProgressResult,
    SendMessageResult,
    SetPermissionRightsResult,
    TransferAssetResult,
    from_json,
    snake_to_camel,
    wrap_json,
)

__all__ = [
    'ENDPOINTS',
    'Endpoint',
    'get_endpoint',
    'ApiRecord',
    'CatenisNodeInfo',
    'ClientInfo',
    'DeviceInfo',
    'GetAssetBalanceResult',
    'IssueAssetResult',
    'LogMessageResult',
    'MessageInfo',
    'MessageProcessError',
    'MessageProcessProgress',
    'MessageProcessSuccess',
    'NotificationEvent',
    'ReadMessageResult',
    'ReissueAssetResult',
    'ResultRecord',
    'RetrieveDeviceIdentificationInfoResult',
    'RetrieveMessageContainerResult',
    'RetrieveMessageProgressResult',
    'SendMessageResult',
    'SetPermissionRightsResult',
    'TransferAssetResult',
    'from_json',
    'snake_to_camel',
    'wrap_json',
]
