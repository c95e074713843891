"""
Catalogue of Catenis API endpoints

Each service method is described as data: HTTP method, path template
relative to the base API URL, and whether the request must be signed.
New endpoints are added here; the clients' generic ``call`` does the rest.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..exceptions import ConfigError, ErrorCodes
from ..signing.types import HttpMethod
from . import models


@dataclass(frozen=True)
class Endpoint:
    """
    Descriptor of a Catenis API endpoint

    Attributes:
        name: Catalogue name, also the name of the client's convenience method
        method: HTTP method
        template: Path template with ``:name`` placeholders
        signed: Whether the request carries CTN1 authentication headers
        result_type: Default typed result, or None for a ResultRecord
    """
    name: str
    method: HttpMethod
    template: str
    signed: bool = True
    result_type: Optional[Any] = None


GET = HttpMethod.GET
POST = HttpMethod.POST

_CATALOGUE = [
    # Messages
    Endpoint("log_message", POST, "messages/log", result_type=models.LogMessageResult),
    Endpoint("send_message", POST, "messages/send", result_type=models.SendMessageResult),
    Endpoint("read_message", GET, "messages/:message_id", result_type=models.ReadMessageResult),
    Endpoint("retrieve_message_container", GET, "messages/:message_id/container",
             result_type=models.RetrieveMessageContainerResult),
    Endpoint("retrieve_message_origin", GET, "messages/:message_id/origin", signed=False),
    Endpoint("retrieve_message_progress", GET, "messages/:message_id/progress",
             result_type=models.RetrieveMessageProgressResult),
    Endpoint("list_messages", GET, "messages"),

    # Assets
    Endpoint("issue_asset", POST, "assets/issue", result_type=models.IssueAssetResult),
    Endpoint("reissue_asset", POST, "assets/:asset_id/issue", result_type=models.ReissueAssetResult),
    Endpoint("transfer_asset", POST, "assets/:asset_id/transfer", result_type=models.TransferAssetResult),
    Endpoint("retrieve_asset_info", GET, "assets/:asset_id"),
    Endpoint("get_asset_balance", GET, "assets/:asset_id/balance", result_type=models.GetAssetBalanceResult),
    Endpoint("list_owned_assets", GET, "assets/owned"),
    Endpoint("list_issued_assets", GET, "assets/issued"),
    Endpoint("retrieve_asset_issuance_history", GET, "assets/:asset_id/issuance"),
    Endpoint("list_asset_holders", GET, "assets/:asset_id/holders"),

    # Asset export and migration
    Endpoint("export_asset", POST, "assets/:asset_id/export/:foreign_blockchain"),
    Endpoint("asset_export_outcome", GET, "assets/:asset_id/export/:foreign_blockchain"),
    Endpoint("list_exported_assets", GET, "assets/exported"),
    Endpoint("migrate_asset", POST, "assets/:asset_id/migrate/:foreign_blockchain"),
    Endpoint("asset_migration_outcome", GET, "assets/migrations/:migration_id"),
    Endpoint("list_asset_migrations", GET, "assets/migrations"),

    # Non-fungible assets and tokens
    Endpoint("issue_non_fungible_asset", POST, "assets/non-fungible/issue"),
    Endpoint("reissue_non_fungible_asset", POST, "assets/non-fungible/:asset_id/issue"),
    Endpoint("retrieve_non_fungible_asset_issuance_progress", GET,
             "assets/non-fungible/issuance/:issuance_id"),
    Endpoint("retrieve_non_fungible_token", GET, "assets/non-fungible/tokens/:token_id"),
    Endpoint("retrieve_non_fungible_token_retrieval_progress", GET,
             "assets/non-fungible/tokens/:token_id/retrieval/:retrieval_id"),
    Endpoint("transfer_non_fungible_token", POST, "assets/non-fungible/tokens/:token_id/transfer"),
    Endpoint("retrieve_non_fungible_token_transfer_progress", GET,
             "assets/non-fungible/tokens/:token_id/transfer/:transfer_id"),

    # Permissions
    Endpoint("list_permission_events", GET, "permission/events"),
    Endpoint("retrieve_permission_rights", GET, "permission/events/:event_name/rights"),
    Endpoint("set_permission_rights", POST, "permission/events/:event_name/rights",
             result_type=models.SetPermissionRightsResult),
    Endpoint("check_effective_permission_right", GET, "permission/events/:event_name/rights/:device_id"),

    # Devices and notifications
    Endpoint("retrieve_device_identification_info", GET, "devices/:device_id",
             result_type=models.RetrieveDeviceIdentificationInfoResult),
    Endpoint("list_notification_events", GET, "notification/events"),
    Endpoint("notify_ws", GET, "notify/ws/:event_name"),
]

ENDPOINTS: Dict[str, Endpoint] = {endpoint.name: endpoint for endpoint in _CATALOGUE}


def get_endpoint(name: str) -> Endpoint:
    """
    Look up an endpoint by catalogue name.

    Raises:
        ConfigError: If no endpoint has that name
    """
    try:
        return ENDPOINTS[name]
    except KeyError:
        raise ConfigError(
            f"Unknown endpoint: {name}",
            ErrorCodes.INVALID_OPTION,
            {"endpoint": name, "available_endpoints": sorted(ENDPOINTS)}
        ) from None
